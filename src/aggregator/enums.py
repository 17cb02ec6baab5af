"""
Enums for the canonical exchange model.

This module defines the standardized enum values used throughout the aggregator.
These enums are the semantic vocabulary every exchange adapter translates into,
so the trading application never sees an exchange-specific token.

"""

from __future__ import annotations

import enum

# =============================================================================
# EXCHANGE IDENTIFIERS
# =============================================================================


class Exchange(str, enum.Enum):
    """
    Supported exchange identifiers.

    These identifiers select the adapter, the exchange profile (symbol
    mapping, quotas, throttle tokens) and the order vocabulary.
    """

    BITFINEX = "bitfinex"
    BITTREX = "bittrex"
    KRAKEN = "kraken"
    BINANCE = "binance"


class MarketType(str, enum.Enum):
    """
    Order book flavors for the same currency pair.

    Stored as the second-level key of the order book store.
    """

    SPOT = "spot"
    MARGIN = "margin"


# =============================================================================
# SYMBOL FORMATTING
# =============================================================================


class SymbolCase(str, enum.Enum):
    """Case convention an exchange uses for its native symbols."""

    UPPER = "upper"
    LOWER = "lower"

    def apply(self, value: str) -> str:
        """Apply the case convention to a string."""
        return value.upper() if self is SymbolCase.UPPER else value.lower()


# =============================================================================
# ORDER ENUMS
# =============================================================================


class OrderSide(str, enum.Enum):
    """
    Standardized order side.

    Unlike the lenient parsing used for public market data, order sides are
    never guessed: adapters map exchange tokens through an explicit lookup.
    """

    BUY = "buy"
    SELL = "sell"


class OrderType(str, enum.Enum):
    """Canonical order types supported by the adapters."""

    EXCHANGE_LIMIT = "exchange_limit"  # Limit order on the exchange (spot) wallet
    MARGIN_LIMIT = "margin_limit"  # Limit order on the margin wallet


class OrderStatus(str, enum.Enum):
    """
    Canonical order status.

    Every exchange status vocabulary collapses onto these four values.
    """

    ACTIVE = "active"  # Order is on the book and may still fill
    FILLED = "filled"  # Order closed with nothing remaining
    ABORTED = "aborted"  # Order closed with an unfilled remainder
    UNKNOWN = "unknown"  # Raw status was not recognized


class StatusClass(str, enum.Enum):
    """
    Intermediate classification of a raw exchange status.

    Exchange vocabularies map exhaustively onto these classes; the remaining
    amount then decides between FILLED and ABORTED for closed orders.
    """

    OPEN = "open"
    CLOSED = "closed"


class FillBasis(str, enum.Enum):
    """Which quantity an exchange reports alongside the original amount."""

    REMAINING = "remaining"  # filled = original - remaining
    EXECUTED = "executed"  # filled = executed


class TimestampFormat(str, enum.Enum):
    """Encodings exchanges use for order creation times."""

    DECIMAL_SECONDS = "decimal_seconds"  # "1500000000.1234"
    MILLISECONDS = "milliseconds"  # 1500000000123
    ISO8601 = "iso8601"  # "2017-07-14T02:40:00.123" (UTC, no zone)


class StaleReason(str, enum.Enum):
    """Why the dispatcher served a stale value instead of calling the exchange."""

    THROTTLED = "throttled"  # Called too soon, or a call for the key is in flight
    BANNED = "banned"  # Exchange ban window still active
    PROVIDER_THROTTLE = "provider_throttle"  # Exchange rejected this call
