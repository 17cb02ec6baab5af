"""Symbol codec protocol."""

from typing import Protocol, runtime_checkable

from src.aggregator.model.pair import CurrencyPair


@runtime_checkable
class SymbolCodec(Protocol):
    """
    Bidirectional mapping between canonical pairs and native symbols.

    For every pair the codec knows, to_pair(to_symbol(pair)) == pair.
    """

    def to_symbol(self, pair: CurrencyPair) -> str:
        """Translate a canonical pair into the exchange's native symbol."""
        ...

    def to_pair(self, symbol: str) -> CurrencyPair:
        """Translate a native symbol back into a canonical pair."""
        ...
