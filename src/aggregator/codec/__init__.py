"""
Symbol codecs.

build_codec() picks the codec implementation for an exchange symbol mapping.
"""

from src.aggregator.codec.base import SymbolCodec
from src.aggregator.codec.delimited import DelimitedCodec, FixedWidthCodec
from src.aggregator.codec.mapping import (
    DelimitedMapping,
    ExchangeSymbolMapping,
    FixedWidthMapping,
    TableMapping,
)
from src.aggregator.codec.table import MarketRow, TableCodec


def build_codec(
    mapping: DelimitedMapping | FixedWidthMapping | TableMapping,
    exchange: str | None = None,
) -> DelimitedCodec | FixedWidthCodec | TableCodec:
    """
    Create the codec for a symbol mapping.

    Table codecs start empty and are filled by TableCodec.rebuild() once the
    exchange market list has been fetched.
    """
    match mapping:
        case DelimitedMapping():
            return DelimitedCodec(mapping)
        case FixedWidthMapping():
            return FixedWidthCodec(mapping)
        case TableMapping():
            return TableCodec(mapping, exchange=exchange)
        case _:
            raise ValueError(f"Unsupported symbol mapping: {mapping!r}")


__all__ = [
    "DelimitedCodec",
    "DelimitedMapping",
    "ExchangeSymbolMapping",
    "FixedWidthCodec",
    "FixedWidthMapping",
    "MarketRow",
    "SymbolCodec",
    "TableCodec",
    "TableMapping",
    "build_codec",
]
