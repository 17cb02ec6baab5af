"""Codecs for symbols with a fixed layout: delimited or fixed width."""

from pydantic import ValidationError

from src.aggregator.codec.mapping import DelimitedMapping, FixedWidthMapping
from src.aggregator.errors import InvalidSymbolFormat
from src.aggregator.model.pair import CurrencyPair


def _build_pair(symbol: str, first: str, second: str, inverted: bool) -> CurrencyPair:
    base, quote = (second, first) if inverted else (first, second)
    try:
        return CurrencyPair(base=base, quote=quote)
    except ValidationError as e:
        raise InvalidSymbolFormat(symbol, "does not name two distinct currencies") from e


class DelimitedCodec:
    """
    Codec for symbols like "BTC-ETH" or "eth_btc".

    When the mapping is inverted the exchange writes the quote currency
    first, so (ETH, BTC) is spelled "BTC-ETH".
    """

    def __init__(self, mapping: DelimitedMapping) -> None:
        self.mapping = mapping

    def to_symbol(self, pair: CurrencyPair) -> str:
        ordered = pair.invert() if self.mapping.inverted else pair
        return self.mapping.case.apply(ordered.display(self.mapping.delimiter))

    def to_pair(self, symbol: str) -> CurrencyPair:
        first, sep, second = symbol.partition(self.mapping.delimiter)
        if not sep:
            raise InvalidSymbolFormat(symbol, f"missing delimiter '{self.mapping.delimiter}'")
        if not first or not second or self.mapping.delimiter in second:
            raise InvalidSymbolFormat(symbol, "expected exactly two non-empty currency codes")
        return _build_pair(symbol, first, second, self.mapping.inverted)


class FixedWidthCodec:
    """Codec for delimiter-less symbols like "btcusd" split at a fixed width."""

    def __init__(self, mapping: FixedWidthMapping) -> None:
        self.mapping = mapping

    def to_symbol(self, pair: CurrencyPair) -> str:
        ordered = pair.invert() if self.mapping.inverted else pair
        if len(ordered.base) != self.mapping.width:
            raise InvalidSymbolFormat(
                ordered.display(""),
                f"first currency must be {self.mapping.width} characters",
            )
        symbol = self.mapping.case.apply(ordered.display(""))
        if len(symbol) not in self.mapping.lengths:
            raise InvalidSymbolFormat(symbol, f"length must be one of {self.mapping.lengths}")
        return symbol

    def to_pair(self, symbol: str) -> CurrencyPair:
        if len(symbol) not in self.mapping.lengths:
            raise InvalidSymbolFormat(symbol, f"length must be one of {self.mapping.lengths}")
        width = self.mapping.width
        return _build_pair(symbol, symbol[:width], symbol[width:], self.mapping.inverted)
