"""
Canonical currency pair.

A CurrencyPair is the exchange-independent name of a market. Exchanges spell
the same market in many ways ("BTCUSD", "btc-usd", "USD-BTC", "XXBTZUSD"),
the symbol codecs translate between those spellings and this model.
"""

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class CurrencyPair(BaseModel):
    """
    Immutable (base, quote) pair of upper-case currency codes.

    Equality and hashing depend only on the two codes, so pairs can be used
    as dictionary keys by the order book store and the table codecs.
    """

    base: str
    quote: str

    model_config = ConfigDict(frozen=True)

    @field_validator("base", "quote", mode="before")
    @classmethod
    def validate_code(cls, v: str) -> str:
        """Strip and upper-case currency codes, rejecting empty ones."""
        if not isinstance(v, str):
            raise ValueError("Currency code must be a string")
        code = v.strip().upper()
        if not code:
            raise ValueError("Currency code must not be empty")
        return code

    @model_validator(mode="after")
    def validate_distinct(self) -> "CurrencyPair":
        """Ensure base and quote differ."""
        if self.base == self.quote:
            raise ValueError(f"Base and quote must differ, got {self.base}/{self.quote}")
        return self

    @classmethod
    def of(cls, base: str, quote: str) -> "CurrencyPair":
        """Shorthand constructor."""
        return cls(base=base, quote=quote)

    @classmethod
    def parse(cls, value: str, delimiter: str = "/") -> "CurrencyPair":
        """
        Build a pair from a delimited string such as "BTC/USD".

        Raises:
            ValueError: If the delimiter is missing or a side is empty

        """
        base, sep, quote = value.partition(delimiter)
        if not sep:
            raise ValueError(f"Missing delimiter '{delimiter}' in '{value}'")
        return cls(base=base, quote=quote)

    @property
    def code(self) -> str:
        """Canonical display code, e.g. BTC/USD."""
        return self.display("/")

    def invert(self) -> "CurrencyPair":
        """Return the pair with base and quote swapped."""
        return CurrencyPair(base=self.quote, quote=self.base)

    def display(self, delimiter: str = "/", uppercase: bool = True) -> str:
        """Render the pair with a delimiter and case convention."""
        text = f"{self.base}{delimiter}{self.quote}"
        return text if uppercase else text.lower()

    def __str__(self) -> str:
        return self.code
