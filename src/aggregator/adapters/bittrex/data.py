"""
Bittrex v1.1 REST API Pydantic Models.

Bittrex sends numbers as JSON floats; properties convert them through
their string form so Decimal arithmetic stays exact.
"""

from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from src.aggregator.normalize.vocabulary import BittrexOrderStatus

Number = str | float | int


def _decimal(value: Number | None) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value))


class BittrexMarket(BaseModel):
    """Entry of /public/getmarkets. MarketName is "<base currency>-<market currency>"."""

    market_name: str = Field(alias="MarketName")
    market_currency: str = Field(alias="MarketCurrency")
    base_currency: str = Field(alias="BaseCurrency")
    min_trade_size_raw: Number = Field(default=0, alias="MinTradeSize")
    is_active: bool = Field(default=True, alias="IsActive")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def min_trade_size(self) -> Decimal:
        return Decimal(str(self.min_trade_size_raw))


class BittrexBookEntry(BaseModel):
    quantity_raw: Number = Field(alias="Quantity")
    rate_raw: Number = Field(alias="Rate")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def level(self) -> tuple[Decimal, Decimal]:
        return (Decimal(str(self.rate_raw)), Decimal(str(self.quantity_raw)))


class BittrexBook(BaseModel):
    buy: list[BittrexBookEntry] | None = None
    sell: list[BittrexBookEntry] | None = None

    model_config = ConfigDict(extra="ignore")


class BittrexTicker(BaseModel):
    bid: Number | None = Field(default=None, alias="Bid")
    ask: Number | None = Field(default=None, alias="Ask")
    last: Number = Field(alias="Last")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def decimals(self) -> dict[str, Decimal | None]:
        return {"last": _decimal(self.last), "bid": _decimal(self.bid), "ask": _decimal(self.ask)}


class BittrexOrder(BaseModel):
    """
    Order from /market/getopenorders or /account/getorder.

    The two endpoints name the order type differently (OrderType / Type).
    An order is closed once Closed carries a timestamp.
    """

    order_uuid: str = Field(alias="OrderUuid")
    exchange: str = Field(alias="Exchange")
    order_type: str = Field(validation_alias=AliasChoices("OrderType", "Type"))
    quantity_raw: Number = Field(alias="Quantity")
    quantity_remaining_raw: Number = Field(alias="QuantityRemaining")
    limit_raw: Number = Field(alias="Limit")
    price_per_unit_raw: Number | None = Field(default=None, alias="PricePerUnit")
    opened: str = Field(alias="Opened")
    closed: str | None = Field(default=None, alias="Closed")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def order_id(self) -> str:
        return self.order_uuid

    @property
    def symbol(self) -> str:
        return self.exchange

    @property
    def raw_status(self) -> str:
        status = BittrexOrderStatus.CLOSED if self.closed else BittrexOrderStatus.OPEN
        return status.value

    @property
    def raw_side(self) -> str:
        return self.order_type

    @property
    def raw_type(self) -> str:
        return self.order_type

    @property
    def original_amount(self) -> Decimal:
        return Decimal(str(self.quantity_raw))

    @property
    def reported_amount(self) -> Decimal:
        return Decimal(str(self.quantity_remaining_raw))

    @property
    def limit_price(self) -> Decimal:
        return Decimal(str(self.limit_raw))

    @property
    def average_price(self) -> Decimal | None:
        return _decimal(self.price_per_unit_raw)

    @property
    def created(self) -> str:
        return self.opened


class BittrexBalance(BaseModel):
    currency_raw: str = Field(alias="Currency")
    balance_raw: Number = Field(alias="Balance")
    available_raw: Number = Field(alias="Available")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def currency(self) -> str:
        return self.currency_raw

    @property
    def total(self) -> Decimal:
        return Decimal(str(self.balance_raw))

    @property
    def available(self) -> Decimal:
        return Decimal(str(self.available_raw))

    @property
    def hold(self) -> Decimal | None:
        return None
