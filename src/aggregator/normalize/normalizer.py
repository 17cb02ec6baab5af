"""
Order normalizer.

Maps exchange order and balance payloads onto the canonical models. The
rules shared by all exchanges live here; what differs per exchange is
described by its OrderVocabulary.
"""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation

from src.aggregator.codec.base import SymbolCodec
from src.aggregator.enums import FillBasis, OrderStatus, StatusClass, TimestampFormat
from src.aggregator.errors import ProviderError, UnsupportedOrderField
from src.aggregator.model.account import AccountBalance, AccountInfo
from src.aggregator.model.order import CanonicalOrder
from src.aggregator.normalize.vocabulary import OrderVocabulary
from src.aggregator.protocols.exchange import RawBalanceProtocol, RawOrderProtocol

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class NormalizationContext:
    """Exchange-specific collaborators for one normalization call."""

    def __init__(self, vocabulary: OrderVocabulary, codec: SymbolCodec) -> None:
        self.vocabulary = vocabulary
        self.codec = codec

    @property
    def exchange(self) -> str:
        return self.vocabulary.exchange.value


def parse_timestamp(value: str | int | float, fmt: TimestampFormat) -> int:
    """
    Convert an exchange timestamp to whole seconds since the epoch.

    Sub-second precision is always truncated, never rounded.
    """
    match fmt:
        case TimestampFormat.DECIMAL_SECONDS:
            try:
                return int(Decimal(str(value)))
            except InvalidOperation as e:
                raise ValueError(f"Invalid decimal seconds timestamp: {value!r}") from e
        case TimestampFormat.MILLISECONDS:
            return int(value) // 1000
        case TimestampFormat.ISO8601:
            parsed = datetime.fromisoformat(str(value))
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=UTC)
            return int(parsed.timestamp())
        case _:
            raise ValueError(f"Unsupported timestamp format: {fmt}")


class OrderNormalizer:
    """Stateless translator from raw exchange payloads to canonical records."""

    def normalize(self, raw: RawOrderProtocol, context: NormalizationContext) -> CanonicalOrder:
        """
        Normalize one order.

        Raises:
            UnsupportedOrderField: If the side or type token is unknown
            ProviderError: If the reported amount exceeds the original amount
            SymbolError: If the symbol cannot be decoded

        """
        vocabulary = context.vocabulary

        side = vocabulary.sides.get(raw.raw_side)
        if side is None:
            raise UnsupportedOrderField("side", raw.raw_side, context.exchange)
        order_type = vocabulary.types.get(raw.raw_type)
        if order_type is None:
            raise UnsupportedOrderField("type", raw.raw_type, context.exchange)

        original = raw.original_amount
        if vocabulary.fill_basis is FillBasis.REMAINING:
            remaining = raw.reported_amount
            filled = original - remaining
        else:
            filled = raw.reported_amount
            remaining = original - filled
        if filled < 0 or remaining < 0:
            raise ProviderError(
                f"{context.exchange}: order {raw.order_id} reports {raw.reported_amount} "
                f"against an original amount of {original}"
            )

        status = self._status(raw, remaining, context)

        average = raw.average_price
        if status is not OrderStatus.ACTIVE and average is not None and average > 0:
            rate = average
        else:
            rate = raw.limit_price

        return CanonicalOrder(
            id=raw.order_id,
            pair=context.codec.to_pair(raw.symbol),
            side=side,
            order_type=order_type,
            status=status,
            original_amount=original,
            filled_amount=filled,
            remaining_amount=remaining,
            rate=rate,
            created_at=parse_timestamp(raw.created, vocabulary.timestamp_format),
        )

    def _status(
        self,
        raw: RawOrderProtocol,
        remaining: Decimal,
        context: NormalizationContext,
    ) -> OrderStatus:
        status_class = context.vocabulary.classify(raw.raw_status)
        if status_class is None:
            logger.warning(
                f"{context.exchange}: unrecognized status '{raw.raw_status}' "
                f"for order {raw.order_id}"
            )
            return OrderStatus.UNKNOWN
        if status_class is StatusClass.OPEN:
            return OrderStatus.ACTIVE
        # Closed with an unfilled remainder is reported as aborted, even when
        # the exchange closed it for another reason after a partial fill.
        return OrderStatus.FILLED if remaining == 0 else OrderStatus.ABORTED

    def normalize_many(
        self,
        raws: Iterable[RawOrderProtocol],
        context: NormalizationContext,
    ) -> list[CanonicalOrder]:
        """Normalize orders, preserving their order."""
        return [self.normalize(raw, context) for raw in raws]

    def normalize_balances(
        self,
        rows: Iterable[RawBalanceProtocol],
        exchange: str,
        aliases: dict[str, str] | None = None,
    ) -> AccountInfo:
        """
        Build AccountInfo from exchange balance rows.

        Rows of the same currency (e.g. several Bitfinex wallets) are merged.
        """
        balances: dict[str, AccountBalance] = {}
        for row in rows:
            currency = (aliases or {}).get(row.currency, row.currency).upper()
            balance = AccountBalance(
                currency=currency,
                available=_available(row),
                hold=_hold(row),
            )
            existing = balances.get(currency)
            balances[currency] = existing.merged(balance) if existing else balance
        return AccountInfo(exchange=exchange, balances=balances)


def _available(row: RawBalanceProtocol) -> Decimal:
    if row.available is not None:
        return row.available
    if row.total is not None:
        return row.total - (row.hold or ZERO)
    return ZERO


def _hold(row: RawBalanceProtocol) -> Decimal:
    if row.hold is not None:
        return row.hold
    if row.total is not None and row.available is not None:
        return row.total - row.available
    return ZERO
