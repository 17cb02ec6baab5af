"""
Order book store.

Concurrency-safe cache of the latest order book snapshot per
(currency pair, market type). Polling tasks write, request handlers read.
"""

import threading
from datetime import UTC, datetime

from src.aggregator.enums import MarketType
from src.aggregator.errors import NotFound
from src.aggregator.model.book import OrderBookSnapshot
from src.aggregator.model.pair import CurrencyPair


class OrderBookStore:
    """
    Two-level map pair -> market type -> snapshot behind one lock.

    Snapshots are immutable and swapped as a whole, so a reader sees either
    the complete old book or the complete new one.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._books: dict[CurrencyPair, dict[MarketType, OrderBookSnapshot]] = {}

    def get(self, pair: CurrencyPair, market_type: MarketType = MarketType.SPOT) -> OrderBookSnapshot:
        """
        Latest snapshot for a pair.

        Raises:
            NotFound: If the book was never stored. An empty book that was
                stored is returned as is.

        """
        with self._lock:
            snapshot = self._books.get(pair, {}).get(market_type)
        if snapshot is None:
            raise NotFound(pair.code, market_type.value)
        return snapshot

    def put(
        self,
        pair: CurrencyPair,
        market_type: MarketType,
        snapshot: OrderBookSnapshot,
    ) -> OrderBookSnapshot:
        """
        Replace the stored snapshot, stamping last_updated with the store time.

        Returns:
            The snapshot as stored

        """
        stored = snapshot.model_copy(
            update={
                "pair": pair,
                "market_type": market_type,
                "last_updated": datetime.now(UTC),
            }
        )
        with self._lock:
            self._books.setdefault(pair, {})[market_type] = stored
        return stored

    def pairs(self) -> list[CurrencyPair]:
        """Pairs with at least one stored book."""
        with self._lock:
            return list(self._books)

    def market_types(self, pair: CurrencyPair) -> list[MarketType]:
        """Market types stored for a pair."""
        with self._lock:
            return list(self._books.get(pair, {}))

    def __contains__(self, key: tuple[CurrencyPair, MarketType]) -> bool:
        pair, market_type = key
        with self._lock:
            return market_type in self._books.get(pair, {})
