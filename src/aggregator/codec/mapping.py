"""
Exchange symbol mapping descriptions.

A mapping describes how one exchange spells currency pairs. It is plain
data built from exchange metadata; build_codec() turns it into a codec.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.aggregator.enums import SymbolCase


class DelimitedMapping(BaseModel):
    """Symbols formed as <first><delimiter><second>, e.g. "BTC-ETH"."""

    kind: Literal["delimited"] = "delimited"
    delimiter: str = Field(..., min_length=1)
    case: SymbolCase = SymbolCase.UPPER
    inverted: bool = False

    model_config = ConfigDict(frozen=True)


class FixedWidthMapping(BaseModel):
    """
    Delimiter-less symbols split at a known width, e.g. "btcusd".

    The first currency code is always `width` characters long; the symbol
    must have one of `lengths` characters in total.
    """

    kind: Literal["fixed_width"] = "fixed_width"
    width: int = Field(default=3, ge=1)
    lengths: tuple[int, ...] = (6,)
    case: SymbolCase = SymbolCase.UPPER
    inverted: bool = False

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_lengths(self) -> "FixedWidthMapping":
        """Every accepted length must leave room for a second code."""
        if not self.lengths or any(n <= self.width for n in self.lengths):
            raise ValueError(f"Lengths {self.lengths} must all exceed width {self.width}")
        return self


class TableMapping(BaseModel):
    """
    Opaque symbols resolved through a table built from the market list.

    `aliases` maps exchange asset names to currency codes (e.g. XXBT -> XBT).
    With `strict_aliases`, assets missing from the alias map are unresolvable
    and their markets are skipped.
    """

    kind: Literal["table"] = "table"
    aliases: dict[str, str] = Field(default_factory=dict)
    strict_aliases: bool = False
    case: SymbolCase = SymbolCase.UPPER

    model_config = ConfigDict(frozen=True)


ExchangeSymbolMapping = Annotated[
    DelimitedMapping | FixedWidthMapping | TableMapping,
    Field(discriminator="kind"),
]
