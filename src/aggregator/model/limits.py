"""Trading limits for a currency pair."""

from decimal import ROUND_DOWN, Decimal

from pydantic import BaseModel, ConfigDict, Field


class PairLimits(BaseModel):
    """
    Precision and minimums an exchange enforces for one pair.

    A decimals value of -1 means the exchange does not define that precision.
    Defaults apply when an exchange publishes nothing.
    """

    price_decimals: int = Field(default=8, ge=-1)
    amount_decimals: int = Field(default=8, ge=-1)
    min_amount: Decimal = Field(default=Decimal("0.00000001"), ge=0)
    min_total: Decimal = Field(default=Decimal("0"), ge=0)

    model_config = ConfigDict(frozen=True)

    def round_price(self, price: Decimal) -> Decimal:
        """Truncate a price to the allowed precision, if any."""
        return _truncate(price, self.price_decimals)

    def round_amount(self, amount: Decimal) -> Decimal:
        """Truncate an amount to the allowed precision, if any."""
        return _truncate(amount, self.amount_decimals)

    def accepts(self, amount: Decimal, price: Decimal) -> bool:
        """Whether an order of this size satisfies the minimums."""
        return amount >= self.min_amount and amount * price >= self.min_total


def _truncate(value: Decimal, decimals: int) -> Decimal:
    if decimals < 0:
        return value
    return value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_DOWN)


def decimals_of(step: str | Decimal) -> int:
    """Number of decimal places implied by a step size such as '0.00100000'."""
    normalized = Decimal(str(step)).normalize()
    exponent = normalized.as_tuple().exponent
    if not isinstance(exponent, int):
        raise ValueError(f"Step size must be finite, got {step}")
    return max(0, -exponent)
