"""
Per-exchange order vocabularies.

Each exchange spells order statuses, sides and types its own way. The raw
status tokens are enums with an exhaustive mapping onto StatusClass, so a
token added to an enum without a mapping is caught by the test suite rather
than silently reported as unknown.
"""

import enum
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from src.aggregator.enums import (
    Exchange,
    FillBasis,
    OrderSide,
    OrderType,
    StatusClass,
    TimestampFormat,
)

# =============================================================================
# RAW STATUS ENUMS
# =============================================================================


class BitfinexOrderStatus(str, enum.Enum):
    """Bitfinex v1 reports is_live; the adapter turns it into a token."""

    LIVE = "live"
    CLOSED = "closed"


class BittrexOrderStatus(str, enum.Enum):
    """Bittrex reports a Closed timestamp; the adapter turns it into a token."""

    OPEN = "open"
    CLOSED = "closed"


class KrakenOrderStatus(str, enum.Enum):
    PENDING = "pending"
    OPEN = "open"
    CLOSED = "closed"
    CANCELED = "canceled"
    EXPIRED = "expired"


class BinanceOrderStatus(str, enum.Enum):
    NEW = "NEW"
    PARTIALLY_FILLED = "PARTIALLY_FILLED"
    PENDING_CANCEL = "PENDING_CANCEL"
    FILLED = "FILLED"
    CANCELED = "CANCELED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"
    REPLACED = "REPLACED"


BITFINEX_STATUS_CLASSES: dict[BitfinexOrderStatus, StatusClass] = {
    BitfinexOrderStatus.LIVE: StatusClass.OPEN,
    BitfinexOrderStatus.CLOSED: StatusClass.CLOSED,
}

BITTREX_STATUS_CLASSES: dict[BittrexOrderStatus, StatusClass] = {
    BittrexOrderStatus.OPEN: StatusClass.OPEN,
    BittrexOrderStatus.CLOSED: StatusClass.CLOSED,
}

KRAKEN_STATUS_CLASSES: dict[KrakenOrderStatus, StatusClass] = {
    KrakenOrderStatus.PENDING: StatusClass.OPEN,
    KrakenOrderStatus.OPEN: StatusClass.OPEN,
    KrakenOrderStatus.CLOSED: StatusClass.CLOSED,
    KrakenOrderStatus.CANCELED: StatusClass.CLOSED,
    KrakenOrderStatus.EXPIRED: StatusClass.CLOSED,
}

BINANCE_STATUS_CLASSES: dict[BinanceOrderStatus, StatusClass] = {
    BinanceOrderStatus.NEW: StatusClass.OPEN,
    BinanceOrderStatus.PARTIALLY_FILLED: StatusClass.OPEN,
    BinanceOrderStatus.PENDING_CANCEL: StatusClass.OPEN,
    BinanceOrderStatus.FILLED: StatusClass.CLOSED,
    BinanceOrderStatus.CANCELED: StatusClass.CLOSED,
    BinanceOrderStatus.REJECTED: StatusClass.CLOSED,
    BinanceOrderStatus.EXPIRED: StatusClass.CLOSED,
    BinanceOrderStatus.REPLACED: StatusClass.CLOSED,
}


# =============================================================================
# VOCABULARY
# =============================================================================


class OrderVocabulary(BaseModel):
    """Everything the normalizer needs to know about one exchange's orders."""

    exchange: Exchange
    status_enum: type[enum.Enum]
    status_classes: Mapping[Any, StatusClass]
    sides: dict[str, OrderSide]
    types: dict[str, OrderType]
    fill_basis: FillBasis
    timestamp_format: TimestampFormat

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def classify(self, raw_status: str) -> StatusClass | None:
        """Status class for a raw token, None if the token is not recognized."""
        try:
            member = self.status_enum(raw_status)
        except ValueError:
            return None
        return self.status_classes.get(member)

    def unmapped_statuses(self) -> list[enum.Enum]:
        """Enum members lacking a status class."""
        return [member for member in self.status_enum if member not in self.status_classes]


BITFINEX_VOCABULARY = OrderVocabulary(
    exchange=Exchange.BITFINEX,
    status_enum=BitfinexOrderStatus,
    status_classes=BITFINEX_STATUS_CLASSES,
    sides={"buy": OrderSide.BUY, "sell": OrderSide.SELL},
    types={"exchange limit": OrderType.EXCHANGE_LIMIT, "limit": OrderType.MARGIN_LIMIT},
    fill_basis=FillBasis.EXECUTED,
    timestamp_format=TimestampFormat.DECIMAL_SECONDS,
)

BITTREX_VOCABULARY = OrderVocabulary(
    exchange=Exchange.BITTREX,
    status_enum=BittrexOrderStatus,
    status_classes=BITTREX_STATUS_CLASSES,
    sides={"LIMIT_BUY": OrderSide.BUY, "LIMIT_SELL": OrderSide.SELL},
    types={"LIMIT_BUY": OrderType.EXCHANGE_LIMIT, "LIMIT_SELL": OrderType.EXCHANGE_LIMIT},
    fill_basis=FillBasis.REMAINING,
    timestamp_format=TimestampFormat.ISO8601,
)

KRAKEN_VOCABULARY = OrderVocabulary(
    exchange=Exchange.KRAKEN,
    status_enum=KrakenOrderStatus,
    status_classes=KRAKEN_STATUS_CLASSES,
    sides={"buy": OrderSide.BUY, "sell": OrderSide.SELL},
    types={"limit": OrderType.EXCHANGE_LIMIT},
    fill_basis=FillBasis.EXECUTED,
    timestamp_format=TimestampFormat.DECIMAL_SECONDS,
)

BINANCE_VOCABULARY = OrderVocabulary(
    exchange=Exchange.BINANCE,
    status_enum=BinanceOrderStatus,
    status_classes=BINANCE_STATUS_CLASSES,
    sides={"BUY": OrderSide.BUY, "SELL": OrderSide.SELL},
    types={"LIMIT": OrderType.EXCHANGE_LIMIT},
    fill_basis=FillBasis.EXECUTED,
    timestamp_format=TimestampFormat.MILLISECONDS,
)

VOCABULARIES: dict[Exchange, OrderVocabulary] = {
    Exchange.BITFINEX: BITFINEX_VOCABULARY,
    Exchange.BITTREX: BITTREX_VOCABULARY,
    Exchange.KRAKEN: KRAKEN_VOCABULARY,
    Exchange.BINANCE: BINANCE_VOCABULARY,
}
