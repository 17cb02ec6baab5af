"""Exchange adapters."""

from src.aggregator.adapters.base import ExchangeAdapter, MarketInfo
from src.aggregator.adapters.binance import BinanceAdapter
from src.aggregator.adapters.bitfinex import BitfinexAdapter
from src.aggregator.adapters.bittrex import BittrexAdapter
from src.aggregator.adapters.kraken import KrakenAdapter
from src.aggregator.adapters.profiles import PROFILES, EndpointQuotas, ExchangeProfile

__all__ = [
    "PROFILES",
    "BinanceAdapter",
    "BitfinexAdapter",
    "BittrexAdapter",
    "EndpointQuotas",
    "ExchangeAdapter",
    "ExchangeProfile",
    "KrakenAdapter",
    "MarketInfo",
]
