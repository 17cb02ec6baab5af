"""
Bitfinex v1 REST API Pydantic Models.

Models parse Bitfinex payloads and expose protocol-compliant properties.
Raw fields keep exchange data as-is; properties provide the interface the
normalizer and adapter depend on.
"""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from src.aggregator.normalize.vocabulary import BitfinexOrderStatus


def _to_decimal(value: str | float | None) -> Decimal | None:
    if value is None or value == "":
        return None
    return Decimal(str(value))


class SymbolDetails(BaseModel):
    """Entry of /symbols_details."""

    pair: str
    price_precision: int = 5
    minimum_order_size_raw: str | float = Field(default="0", alias="minimum_order_size")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def minimum_order_size(self) -> Decimal:
        return Decimal(str(self.minimum_order_size_raw))


class BookEntry(BaseModel):
    price_raw: str | float = Field(alias="price")
    amount_raw: str | float = Field(alias="amount")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def level(self) -> tuple[Decimal, Decimal]:
        return (Decimal(str(self.price_raw)), Decimal(str(self.amount_raw)))


class BitfinexBook(BaseModel):
    bids: list[BookEntry] = Field(default_factory=list)
    asks: list[BookEntry] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class BitfinexTicker(BaseModel):
    """Response of /pubticker/{symbol}."""

    last_price: str
    bid: str | None = None
    ask: str | None = None
    high: str | None = None
    low: str | None = None
    volume: str | None = None
    timestamp_raw: str | None = Field(default=None, alias="timestamp")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def timestamp(self) -> datetime:
        if self.timestamp_raw is None:
            return datetime.now(UTC)
        return datetime.fromtimestamp(float(self.timestamp_raw), tz=UTC)

    def decimals(self) -> dict[str, Decimal | None]:
        return {
            "last": _to_decimal(self.last_price),
            "bid": _to_decimal(self.bid),
            "ask": _to_decimal(self.ask),
            "high": _to_decimal(self.high),
            "low": _to_decimal(self.low),
            "volume": _to_decimal(self.volume),
        }


class BitfinexOrder(BaseModel):
    """
    Order object returned by /orders, /order/status and /order/new.

    Bitfinex reports the executed amount and an is_live flag, which is
    turned into a status token for the vocabulary.
    """

    id: int
    symbol_raw: str = Field(alias="symbol")
    side: str
    type: str
    price_raw: str = Field(alias="price")
    avg_execution_price_raw: str | None = Field(default=None, alias="avg_execution_price")
    timestamp: str
    is_live: bool
    original_amount_raw: str = Field(alias="original_amount")
    remaining_amount_raw: str | None = Field(default=None, alias="remaining_amount")
    executed_amount_raw: str = Field(alias="executed_amount")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def order_id(self) -> str:
        return str(self.id)

    @property
    def symbol(self) -> str:
        return self.symbol_raw

    @property
    def raw_status(self) -> str:
        status = BitfinexOrderStatus.LIVE if self.is_live else BitfinexOrderStatus.CLOSED
        return status.value

    @property
    def raw_side(self) -> str:
        return self.side

    @property
    def raw_type(self) -> str:
        return self.type

    @property
    def original_amount(self) -> Decimal:
        return Decimal(self.original_amount_raw)

    @property
    def reported_amount(self) -> Decimal:
        return Decimal(self.executed_amount_raw)

    @property
    def limit_price(self) -> Decimal:
        return Decimal(self.price_raw)

    @property
    def average_price(self) -> Decimal | None:
        return _to_decimal(self.avg_execution_price_raw)

    @property
    def created(self) -> str:
        return self.timestamp


class BitfinexBalance(BaseModel):
    """Wallet balance row; one currency may appear once per wallet type."""

    type: str = "exchange"
    currency_raw: str = Field(alias="currency")
    amount_raw: str = Field(alias="amount")
    available_raw: str = Field(alias="available")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def currency(self) -> str:
        return self.currency_raw.upper()

    @property
    def total(self) -> Decimal:
        return Decimal(self.amount_raw)

    @property
    def available(self) -> Decimal:
        return Decimal(self.available_raw)

    @property
    def hold(self) -> Decimal | None:
        return None
