"""Account balance models."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AccountBalance(BaseModel):
    """
    Balance of one currency.

    The total is always available + hold; exchanges that only report a
    total are treated as having everything available.
    """

    currency: str = Field(..., min_length=1)
    available: Decimal = Decimal("0")
    hold: Decimal = Decimal("0")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def upper_currency(cls, data: dict) -> dict:
        if isinstance(data, dict) and isinstance(data.get("currency"), str):
            data = {**data, "currency": data["currency"].strip().upper()}
        return data

    @property
    def total(self) -> Decimal:
        return self.available + self.hold

    def merged(self, other: "AccountBalance") -> "AccountBalance":
        """Combine two balances of the same currency."""
        if other.currency != self.currency:
            raise ValueError(f"Cannot merge {self.currency} with {other.currency}")
        return AccountBalance(
            currency=self.currency,
            available=self.available + other.available,
            hold=self.hold + other.hold,
        )


class AccountInfo(BaseModel):
    """All balances held on one exchange."""

    exchange: str
    balances: dict[str, AccountBalance] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def balance(self, currency: str) -> AccountBalance:
        """Balance for a currency, zero when the exchange reported none."""
        code = currency.upper()
        return self.balances.get(code) or AccountBalance(currency=code)

    @property
    def currencies(self) -> list[str]:
        return sorted(self.balances)
