"""
Error taxonomy for the aggregator core.

All errors derive from AggregatorError so callers can catch the whole family,
while the concrete classes let them distinguish soft staleness (RateLimited)
from hard failures that must abort the operation.
"""

from typing import Any


class AggregatorError(Exception):
    """Base class for every error raised by the aggregator."""


# Symbol codec errors
class SymbolError(AggregatorError):
    """Base class for symbol/currency pair conversion failures."""


class InvalidSymbolFormat(SymbolError, ValueError):
    """A native symbol does not have the shape the exchange mapping expects."""

    def __init__(self, symbol: str, reason: str) -> None:
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"Invalid symbol '{symbol}': {reason}")


class UnknownMarket(SymbolError, LookupError):
    """A pair or symbol was not present when the market table was built."""

    def __init__(self, market: str, exchange: str | None = None) -> None:
        self.market = market
        self.exchange = exchange
        where = f" on {exchange}" if exchange else ""
        super().__init__(f"Unknown market '{market}'{where}")


# Dispatcher errors
class RateLimited(AggregatorError):
    """
    Soft failure: the call was skipped and only stale data is available.

    Raised by DispatchResult.unwrap_fresh() for callers that cannot tolerate
    stale data. The best available value is attached.
    """

    def __init__(self, key: str, value: Any, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Request '{key}' rate limited ({reason})")


# Provider / transport errors
class ProviderError(AggregatorError):
    """The exchange answered with a business error (e.g. insufficient funds)."""

    def __init__(
        self,
        message: str,
        code: int | str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


class ProviderThrottled(ProviderError):
    """The exchange signaled throttling (HTTP 429 or a rate-limit token)."""


class TransportError(AggregatorError):
    """The request could not be sent or its response could not be decoded."""


class CredentialsMissing(AggregatorError):
    """An authenticated call was attempted without API credentials."""

    def __init__(self, exchange: str) -> None:
        self.exchange = exchange
        super().__init__(f"Authenticated request to {exchange} without credentials set")


# Normalizer errors
class UnsupportedOrderField(AggregatorError, ValueError):
    """An order side/type token cannot be mapped safely."""

    def __init__(self, field: str, value: str, exchange: str) -> None:
        self.field = field
        self.value = value
        self.exchange = exchange
        super().__init__(f"Unsupported order {field} '{value}' from {exchange}")


# Store errors
class NotFound(AggregatorError, LookupError):
    """The order book store has never been populated for this pair/type."""

    def __init__(self, pair: str, market_type: str) -> None:
        self.pair = pair
        self.market_type = market_type
        super().__init__(f"No order book for {pair} ({market_type})")
