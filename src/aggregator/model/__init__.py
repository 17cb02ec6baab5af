"""Canonical exchange models."""

from src.aggregator.model.account import AccountBalance, AccountInfo
from src.aggregator.model.book import OrderBookSnapshot, PriceLevel, SideTotals
from src.aggregator.model.limits import PairLimits
from src.aggregator.model.order import CanonicalOrder, PlacedOrder
from src.aggregator.model.pair import CurrencyPair
from src.aggregator.model.ticker import Ticker

__all__ = [
    "AccountBalance",
    "AccountInfo",
    "CanonicalOrder",
    "CurrencyPair",
    "OrderBookSnapshot",
    "PairLimits",
    "PlacedOrder",
    "PriceLevel",
    "SideTotals",
    "Ticker",
]
