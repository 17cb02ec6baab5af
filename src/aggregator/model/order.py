"""
Canonical order model.

Every exchange order payload is normalized into a CanonicalOrder. Amounts
are exact Decimals so filled + remaining always adds up to the original.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.aggregator.enums import OrderSide, OrderStatus, OrderType
from src.aggregator.model.pair import CurrencyPair


class CanonicalOrder(BaseModel):
    """Exchange-independent view of one order."""

    id: str = Field(..., min_length=1)
    pair: CurrencyPair
    side: OrderSide
    order_type: OrderType = OrderType.EXCHANGE_LIMIT
    status: OrderStatus
    original_amount: Decimal = Field(..., ge=0)
    filled_amount: Decimal = Field(..., ge=0)
    remaining_amount: Decimal = Field(..., ge=0)
    rate: Decimal = Field(..., ge=0)
    created_at: int = Field(..., ge=0, description="Seconds since the epoch")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_amounts(self) -> "CanonicalOrder":
        """Filled amount can never exceed the original amount."""
        if self.filled_amount > self.original_amount:
            raise ValueError(
                f"Filled amount {self.filled_amount} exceeds original {self.original_amount}"
            )
        return self

    @property
    def is_active(self) -> bool:
        """Whether the order can still fill."""
        return self.status is OrderStatus.ACTIVE

    @property
    def fill_ratio(self) -> Decimal:
        """Fraction of the original amount that has been filled."""
        if self.original_amount == 0:
            return Decimal("0")
        return self.filled_amount / self.original_amount


class PlacedOrder(BaseModel):
    """Acknowledgement returned by an exchange for a new order."""

    id: str
    pair: CurrencyPair
    side: OrderSide
    order_type: OrderType
    amount: Decimal
    price: Decimal

    model_config = ConfigDict(frozen=True)
