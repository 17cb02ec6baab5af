"""
Kraken REST API Pydantic Models.

Kraken identifies assets and markets by opaque names ("XXBT", "XXBTZUSD")
and reports orders with the market's altname ("XBTUSD"). Order objects
do not carry their own id; the adapter supplies the txid key.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class KrakenAsset(BaseModel):
    altname: str

    model_config = ConfigDict(extra="ignore")


class KrakenAssetPair(BaseModel):
    """Entry of /0/public/AssetPairs, keyed by the market name."""

    altname: str
    base: str
    quote: str
    pair_decimals: int = 8
    lot_decimals: int = 8
    ordermin_raw: str | None = Field(default=None, alias="ordermin")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def ordermin(self) -> Decimal | None:
        return Decimal(self.ordermin_raw) if self.ordermin_raw else None


class KrakenDepth(BaseModel):
    """Book entries are [price, volume, timestamp] arrays of strings."""

    bids: list[list[str | float]] = Field(default_factory=list)
    asks: list[list[str | float]] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @staticmethod
    def _levels(entries: list[list[str | float]]) -> list[tuple[Decimal, Decimal]]:
        return [(Decimal(str(e[0])), Decimal(str(e[1]))) for e in entries]

    @property
    def bid_levels(self) -> list[tuple[Decimal, Decimal]]:
        return self._levels(self.bids)

    @property
    def ask_levels(self) -> list[tuple[Decimal, Decimal]]:
        return self._levels(self.asks)


class KrakenTicker(BaseModel):
    """Ticker arrays: a=ask, b=bid, c=last trade, v=volume, h=high, l=low."""

    a: list[str]
    b: list[str]
    c: list[str]
    v: list[str] = Field(default_factory=list)
    h: list[str] = Field(default_factory=list)
    l: list[str] = Field(default_factory=list)  # noqa: E741

    model_config = ConfigDict(extra="ignore")

    def decimals(self) -> dict[str, Decimal | None]:
        # The second element of v, h and l covers the last 24 hours
        def last_24h(values: list[str]) -> Decimal | None:
            return Decimal(values[-1]) if values else None

        return {
            "last": Decimal(self.c[0]),
            "bid": Decimal(self.b[0]),
            "ask": Decimal(self.a[0]),
            "volume": last_24h(self.v),
            "high": last_24h(self.h),
            "low": last_24h(self.l),
        }


class KrakenOrderDescription(BaseModel):
    pair: str
    type: str
    ordertype: str
    price: str

    model_config = ConfigDict(extra="ignore")


class KrakenOrder(BaseModel):
    txid: str = ""
    status: str
    opentm: float | str
    descr: KrakenOrderDescription
    vol: str
    vol_exec: str
    price: str = "0"

    model_config = ConfigDict(extra="ignore")

    @property
    def order_id(self) -> str:
        return self.txid

    @property
    def symbol(self) -> str:
        return self.descr.pair

    @property
    def raw_status(self) -> str:
        return self.status

    @property
    def raw_side(self) -> str:
        return self.descr.type

    @property
    def raw_type(self) -> str:
        return self.descr.ordertype

    @property
    def original_amount(self) -> Decimal:
        return Decimal(self.vol)

    @property
    def reported_amount(self) -> Decimal:
        return Decimal(self.vol_exec)

    @property
    def limit_price(self) -> Decimal:
        return Decimal(self.descr.price)

    @property
    def average_price(self) -> Decimal | None:
        return Decimal(self.price)

    @property
    def created(self) -> float | str:
        return self.opentm


class KrakenBalance(BaseModel):
    """Kraken only reports a total per asset."""

    asset: str
    amount: str

    model_config = ConfigDict(extra="ignore")

    @property
    def currency(self) -> str:
        return self.asset

    @property
    def total(self) -> Decimal:
        return Decimal(self.amount)

    @property
    def available(self) -> Decimal | None:
        return None

    @property
    def hold(self) -> Decimal | None:
        return None
