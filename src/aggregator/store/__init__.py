"""Order book storage."""

from src.aggregator.store.book_store import OrderBookStore

__all__ = ["OrderBookStore"]
