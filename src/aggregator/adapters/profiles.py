"""
Exchange profiles.

Static facts about each exchange: where its API lives, how it spells
symbols, how often the protected endpoints may be called, and how it
signals throttling.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.aggregator.codec.mapping import (
    DelimitedMapping,
    FixedWidthMapping,
    TableMapping,
)
from src.aggregator.enums import Exchange, OrderType, SymbolCase
from src.aggregator.normalize.vocabulary import VOCABULARIES, OrderVocabulary


class EndpointQuotas(BaseModel):
    """
    Calls per minute allowed for dispatcher-protected endpoints.

    None falls back to the dispatcher default quota.
    """

    balances: int | None = Field(default=None, ge=1)
    orders: int | None = Field(default=None, ge=1)

    model_config = ConfigDict(frozen=True)


class ExchangeProfile(BaseModel):
    """Everything exchange-specific that is not code."""

    exchange: Exchange
    base_url: str
    mapping: DelimitedMapping | FixedWidthMapping | TableMapping
    quotas: EndpointQuotas = Field(default_factory=EndpointQuotas)
    ban_window_seconds: float = Field(default=60.0, ge=0.0)
    throttle_tokens: tuple[str, ...] = ()
    order_types: tuple[OrderType, ...] = (OrderType.EXCHANGE_LIMIT,)
    book_depth: int = Field(default=100, ge=1)

    model_config = ConfigDict(frozen=True)

    @property
    def name(self) -> str:
        return self.exchange.value

    @property
    def vocabulary(self) -> OrderVocabulary:
        return VOCABULARIES[self.exchange]

    def is_throttle_message(self, message: str | None) -> bool:
        """Whether an exchange error message is one of its throttle tokens."""
        if not message:
            return False
        return any(token in message for token in self.throttle_tokens)


BITFINEX_PROFILE = ExchangeProfile(
    exchange=Exchange.BITFINEX,
    base_url="https://api.bitfinex.com/v1",
    mapping=FixedWidthMapping(width=3, lengths=(6,), case=SymbolCase.LOWER),
    quotas=EndpointQuotas(balances=12, orders=10),
    ban_window_seconds=60.0,
    throttle_tokens=("ERR_RATE_LIMIT",),
    order_types=(OrderType.EXCHANGE_LIMIT, OrderType.MARGIN_LIMIT),
)

BITTREX_PROFILE = ExchangeProfile(
    exchange=Exchange.BITTREX,
    base_url="https://bittrex.com/api/v1.1",
    mapping=DelimitedMapping(delimiter="-", case=SymbolCase.UPPER, inverted=True),
    book_depth=50,
)

KRAKEN_PROFILE = ExchangeProfile(
    exchange=Exchange.KRAKEN,
    base_url="https://api.kraken.com",
    mapping=TableMapping(strict_aliases=True),
    throttle_tokens=("EAPI:Rate limit exceeded", "EGeneral:Too many requests"),
)

BINANCE_PROFILE = ExchangeProfile(
    exchange=Exchange.BINANCE,
    base_url="https://api.binance.com",
    mapping=TableMapping(),
    quotas=EndpointQuotas(balances=20, orders=20),
    throttle_tokens=("-1003",),
)

PROFILES: dict[Exchange, ExchangeProfile] = {
    Exchange.BITFINEX: BITFINEX_PROFILE,
    Exchange.BITTREX: BITTREX_PROFILE,
    Exchange.KRAKEN: KRAKEN_PROFILE,
    Exchange.BINANCE: BINANCE_PROFILE,
}
