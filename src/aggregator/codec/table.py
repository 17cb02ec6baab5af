"""
Table-based symbol codec.

Some exchanges use opaque market identifiers ("XXBTZUSD") or concatenate
codes of varying width ("ETHBTC", "DOGEUSDT"). Those symbols can only be
decoded through a table built from the exchange's market list.
"""

import logging
import threading
from collections.abc import Iterable
from typing import NamedTuple

from pydantic import ValidationError

from src.aggregator.codec.mapping import TableMapping
from src.aggregator.errors import UnknownMarket
from src.aggregator.model.pair import CurrencyPair

logger = logging.getLogger(__name__)


class MarketRow(NamedTuple):
    """
    One market as listed by the exchange: native symbol and asset names.

    `altname` is a second spelling some endpoints report for the same
    market; it decodes to the pair but is never produced by to_symbol().
    """

    symbol: str
    base: str
    quote: str
    altname: str | None = None


class TableCodec:
    """
    Lookup-based codec with an atomically replaceable table.

    Pairs and symbols absent when the table was built raise UnknownMarket.
    """

    def __init__(
        self,
        mapping: TableMapping,
        rows: Iterable[MarketRow] = (),
        exchange: str | None = None,
    ) -> None:
        self.mapping = mapping
        self.exchange = exchange
        self._lock = threading.Lock()
        self._pair_to_symbol: dict[CurrencyPair, str] = {}
        self._symbol_to_pair: dict[str, CurrencyPair] = {}
        self._aliases = dict(mapping.aliases)
        self.rebuild(rows)

    def _resolve(self, asset: str) -> str | None:
        if asset in self._aliases:
            return self._aliases[asset]
        if self.mapping.strict_aliases:
            return None
        return asset

    def rebuild(
        self,
        rows: Iterable[MarketRow],
        aliases: dict[str, str] | None = None,
    ) -> int:
        """
        Replace the table with the given market rows.

        Rows whose assets cannot be resolved are skipped with a warning.
        A new alias map, when given, replaces the current one first.

        Returns:
            Number of markets in the new table

        """
        if aliases is not None:
            self._aliases = dict(aliases)
        pair_to_symbol: dict[CurrencyPair, str] = {}
        symbol_to_pair: dict[str, CurrencyPair] = {}
        for row in rows:
            base = self._resolve(row.base)
            quote = self._resolve(row.quote)
            if base is None or quote is None:
                missing = row.base if base is None else row.quote
                logger.warning(f"Skipping market {row.symbol}: cannot map asset '{missing}'")
                continue
            try:
                pair = CurrencyPair(base=base, quote=quote)
            except ValidationError:
                logger.warning(f"Skipping market {row.symbol}: invalid pair {base}/{quote}")
                continue
            symbol = self.mapping.case.apply(row.symbol)
            pair_to_symbol[pair] = symbol
            symbol_to_pair[symbol] = pair
            if row.altname:
                symbol_to_pair[self.mapping.case.apply(row.altname)] = pair

        with self._lock:
            self._pair_to_symbol = pair_to_symbol
            self._symbol_to_pair = symbol_to_pair
        return len(pair_to_symbol)

    def to_symbol(self, pair: CurrencyPair) -> str:
        with self._lock:
            symbol = self._pair_to_symbol.get(pair)
        if symbol is None:
            raise UnknownMarket(pair.code, self.exchange)
        return symbol

    def to_pair(self, symbol: str) -> CurrencyPair:
        with self._lock:
            pair = self._symbol_to_pair.get(self.mapping.case.apply(symbol))
        if pair is None:
            raise UnknownMarket(symbol, self.exchange)
        return pair

    def known_pairs(self) -> list[CurrencyPair]:
        """Pairs present in the current table, sorted by code."""
        with self._lock:
            pairs = list(self._pair_to_symbol)
        return sorted(pairs, key=lambda p: p.code)

    def __len__(self) -> int:
        with self._lock:
            return len(self._pair_to_symbol)
