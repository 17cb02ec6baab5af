"""
Ticker model.

A minimal last-price summary for one pair. Exchanges differ in which
fields they publish, so everything except the last price is optional.
"""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from src.aggregator.model.pair import CurrencyPair


class Ticker(BaseModel):
    """Last trade price with optional top of book and daily range."""

    pair: CurrencyPair
    last: Decimal = Field(..., ge=0)
    bid: Decimal | None = Field(None, ge=0)
    ask: Decimal | None = Field(None, ge=0)
    high: Decimal | None = Field(None, ge=0)
    low: Decimal | None = Field(None, ge=0)
    volume: Decimal | None = Field(None, ge=0)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(frozen=True)

    @property
    def spread(self) -> Decimal | None:
        """Get the spread."""
        if self.bid is None or self.ask is None:
            return None
        return self.ask - self.bid
