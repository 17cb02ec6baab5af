"""Order and balance normalization."""

from src.aggregator.normalize.normalizer import (
    NormalizationContext,
    OrderNormalizer,
    parse_timestamp,
)
from src.aggregator.normalize.vocabulary import (
    BINANCE_VOCABULARY,
    BITFINEX_VOCABULARY,
    BITTREX_VOCABULARY,
    KRAKEN_VOCABULARY,
    VOCABULARIES,
    OrderVocabulary,
)

__all__ = [
    "BINANCE_VOCABULARY",
    "BITFINEX_VOCABULARY",
    "BITTREX_VOCABULARY",
    "KRAKEN_VOCABULARY",
    "VOCABULARIES",
    "NormalizationContext",
    "OrderNormalizer",
    "OrderVocabulary",
    "parse_timestamp",
]
