"""
Order book snapshot model.

Snapshots are replaced wholesale on every refresh, never merged
incrementally, so the model is frozen and carries both sides together
with the time it was stored.
"""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.aggregator.enums import MarketType
from src.aggregator.model.pair import CurrencyPair


class PriceLevel(BaseModel):
    """A single (price, amount) entry on one side of the book."""

    price: Decimal
    amount: Decimal

    model_config = ConfigDict(frozen=True)

    @field_validator("price", "amount")
    @classmethod
    def validate_positive(cls, v: Decimal) -> Decimal:
        """Ensure price and amount are non-negative."""
        if v < 0:
            raise ValueError("Price and amount must be non-negative")
        return v

    @property
    def value(self) -> Decimal:
        """Quote currency value of this level."""
        return self.price * self.amount

    def to_tuple(self) -> tuple[Decimal, Decimal]:
        """Convert to tuple for compatibility."""
        return (self.price, self.amount)


class SideTotals(BaseModel):
    """Aggregates over one side of the book."""

    amount: Decimal
    value: Decimal

    model_config = ConfigDict(frozen=True)


class OrderBookSnapshot(BaseModel):
    """
    Immutable bid/ask snapshot for one (pair, market type).

    Bids are kept best-first (descending price) and asks best-first
    (ascending price) regardless of the order the exchange sent them in.
    """

    pair: CurrencyPair
    market_type: MarketType = MarketType.SPOT
    bids: tuple[PriceLevel, ...] = ()
    asks: tuple[PriceLevel, ...] = ()
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(frozen=True)

    @field_validator("bids")
    @classmethod
    def sort_bids(cls, v: tuple[PriceLevel, ...]) -> tuple[PriceLevel, ...]:
        return tuple(sorted(v, key=lambda level: level.price, reverse=True))

    @field_validator("asks")
    @classmethod
    def sort_asks(cls, v: tuple[PriceLevel, ...]) -> tuple[PriceLevel, ...]:
        return tuple(sorted(v, key=lambda level: level.price))

    @classmethod
    def from_levels(
        cls,
        pair: CurrencyPair,
        bids: list[tuple[Decimal, Decimal]],
        asks: list[tuple[Decimal, Decimal]],
        market_type: MarketType = MarketType.SPOT,
    ) -> "OrderBookSnapshot":
        """Build a snapshot from raw (price, amount) tuples."""
        return cls(
            pair=pair,
            market_type=market_type,
            bids=tuple(PriceLevel(price=p, amount=a) for p, a in bids),
            asks=tuple(PriceLevel(price=p, amount=a) for p, a in asks),
        )

    @property
    def is_empty(self) -> bool:
        """True when both sides have no levels."""
        return not self.bids and not self.asks

    @property
    def best_bid(self) -> Decimal | None:
        """Get the best bid price."""
        return self.bids[0].price if self.bids else None

    @property
    def best_ask(self) -> Decimal | None:
        """Get the best ask price."""
        return self.asks[0].price if self.asks else None

    @property
    def mid_price(self) -> Decimal | None:
        """Get the mid price."""
        if self.best_bid is None or self.best_ask is None:
            return None
        return (self.best_bid + self.best_ask) / 2

    @property
    def spread(self) -> Decimal | None:
        """Get the spread."""
        if self.best_bid is None or self.best_ask is None:
            return None
        return self.best_ask - self.best_bid

    @property
    def bid_totals(self) -> SideTotals:
        """Collated amount and value of all bids."""
        return _totals(self.bids)

    @property
    def ask_totals(self) -> SideTotals:
        """Collated amount and value of all asks."""
        return _totals(self.asks)

    def restamped(self, when: datetime | None = None) -> "OrderBookSnapshot":
        """Copy of this snapshot with a new last_updated time."""
        return self.model_copy(update={"last_updated": when or datetime.now(UTC)})


def _totals(levels: tuple[PriceLevel, ...]) -> SideTotals:
    amount = sum((level.amount for level in levels), Decimal("0"))
    value = sum((level.value for level in levels), Decimal("0"))
    return SideTotals(amount=amount, value=value)
