"""
Binance REST API Pydantic Models.

Binance symbols concatenate codes of varying width ("ETHBTC",
"DOGEUSDT"), so markets come from /exchangeInfo and decode through a table.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.aggregator.model.limits import PairLimits, decimals_of


class BinanceSymbol(BaseModel):
    """Entry of exchangeInfo.symbols."""

    symbol: str
    status: str = "TRADING"
    base_asset: str = Field(alias="baseAsset")
    quote_asset: str = Field(alias="quoteAsset")
    filters: list[dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def is_trading(self) -> bool:
        return self.status == "TRADING"

    def _filter(self, filter_type: str) -> dict[str, Any]:
        for f in self.filters:
            if f.get("filterType") == filter_type:
                return f
        return {}

    @property
    def limits(self) -> PairLimits:
        """Translate PRICE_FILTER, LOT_SIZE and MIN_NOTIONAL/NOTIONAL filters."""
        values: dict[str, Any] = {}
        tick = self._filter("PRICE_FILTER").get("tickSize")
        if tick and Decimal(tick) > 0:
            values["price_decimals"] = decimals_of(tick)
        lot = self._filter("LOT_SIZE")
        if lot.get("stepSize") and Decimal(lot["stepSize"]) > 0:
            values["amount_decimals"] = decimals_of(lot["stepSize"])
        if lot.get("minQty"):
            values["min_amount"] = Decimal(lot["minQty"])
        notional = self._filter("MIN_NOTIONAL") or self._filter("NOTIONAL")
        if notional.get("minNotional"):
            values["min_total"] = Decimal(notional["minNotional"])
        return PairLimits(**values)


class BinanceBook(BaseModel):
    """Depth entries are [price, quantity] arrays of strings."""

    bids: list[list[str]] = Field(default_factory=list)
    asks: list[list[str]] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @property
    def bid_levels(self) -> list[tuple[Decimal, Decimal]]:
        return [(Decimal(p), Decimal(q)) for p, q, *_ in self.bids]

    @property
    def ask_levels(self) -> list[tuple[Decimal, Decimal]]:
        return [(Decimal(p), Decimal(q)) for p, q, *_ in self.asks]


class BinanceTicker(BaseModel):
    """Response of /api/v3/ticker/24hr."""

    last_price: str = Field(alias="lastPrice")
    bid_price: str | None = Field(default=None, alias="bidPrice")
    ask_price: str | None = Field(default=None, alias="askPrice")
    high_price: str | None = Field(default=None, alias="highPrice")
    low_price: str | None = Field(default=None, alias="lowPrice")
    volume: str | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def decimals(self) -> dict[str, Decimal | None]:
        def to_decimal(value: str | None) -> Decimal | None:
            return Decimal(value) if value else None

        return {
            "last": Decimal(self.last_price),
            "bid": to_decimal(self.bid_price),
            "ask": to_decimal(self.ask_price),
            "high": to_decimal(self.high_price),
            "low": to_decimal(self.low_price),
            "volume": to_decimal(self.volume),
        }


class BinanceOrder(BaseModel):
    """Order from /api/v3/openOrders or /api/v3/order."""

    symbol_raw: str = Field(alias="symbol")
    order_id_raw: int = Field(alias="orderId")
    price: str
    orig_qty: str = Field(alias="origQty")
    executed_qty: str = Field(alias="executedQty")
    cummulative_quote_qty: str | None = Field(default=None, alias="cummulativeQuoteQty")
    status: str
    type: str
    side: str
    time: int

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def order_id(self) -> str:
        return str(self.order_id_raw)

    @property
    def symbol(self) -> str:
        return self.symbol_raw

    @property
    def raw_status(self) -> str:
        return self.status

    @property
    def raw_side(self) -> str:
        return self.side

    @property
    def raw_type(self) -> str:
        return self.type

    @property
    def original_amount(self) -> Decimal:
        return Decimal(self.orig_qty)

    @property
    def reported_amount(self) -> Decimal:
        return Decimal(self.executed_qty)

    @property
    def limit_price(self) -> Decimal:
        return Decimal(self.price)

    @property
    def average_price(self) -> Decimal | None:
        """Quote spent divided by quantity executed, when anything executed."""
        executed = Decimal(self.executed_qty)
        if not self.cummulative_quote_qty or executed <= 0:
            return None
        quote = Decimal(self.cummulative_quote_qty)
        if quote <= 0:
            return None
        return quote / executed

    @property
    def created(self) -> int:
        return self.time


class BinanceBalance(BaseModel):
    asset: str
    free: str
    locked: str

    model_config = ConfigDict(extra="ignore")

    @property
    def currency(self) -> str:
        return self.asset

    @property
    def total(self) -> Decimal | None:
        return None

    @property
    def available(self) -> Decimal:
        return Decimal(self.free)

    @property
    def hold(self) -> Decimal:
        return Decimal(self.locked)
