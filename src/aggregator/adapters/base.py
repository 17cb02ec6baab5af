"""
Exchange adapter base.

An adapter is thin glue around one exchange: it owns a codec, a dispatcher,
an order book store, a normalizer and a transport, and implements the
handful of exchange calls the aggregator needs. Everything shared (store
first lookups, dispatcher protection, normalization) lives here; concrete
adapters only fetch and parse exchange payloads.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from decimal import Decimal

from src.aggregator.adapters.profiles import ExchangeProfile
from src.aggregator.codec import SymbolCodec, build_codec
from src.aggregator.codec.table import MarketRow, TableCodec
from src.aggregator.config import DispatcherConfig
from src.aggregator.dispatch.dispatcher import Clock, DispatchResult, RateLimitedDispatcher
from src.aggregator.enums import MarketType, OrderSide, OrderType
from src.aggregator.errors import NotFound, SymbolError, UnsupportedOrderField
from src.aggregator.model.account import AccountInfo
from src.aggregator.model.book import OrderBookSnapshot
from src.aggregator.model.limits import PairLimits
from src.aggregator.model.order import CanonicalOrder, PlacedOrder
from src.aggregator.model.pair import CurrencyPair
from src.aggregator.model.ticker import Ticker
from src.aggregator.normalize.normalizer import NormalizationContext, OrderNormalizer
from src.aggregator.protocols.exchange import (
    RawBalanceProtocol,
    RawOrderProtocol,
    TransportProtocol,
)
from src.aggregator.store.book_store import OrderBookStore

logger = logging.getLogger(__name__)

BookLevels = list[tuple[Decimal, Decimal]]

BALANCES_KEY = "balances"
ORDERS_KEY = "orders"
DEFAULT_QUOTA_PER_MINUTE = 10


class MarketInfo:
    """A market as loaded from the exchange: its native row and limits."""

    def __init__(self, row: MarketRow, limits: PairLimits | None = None) -> None:
        self.row = row
        self.limits = limits or PairLimits()


class ExchangeAdapter(ABC):
    """
    Canonical surface over one exchange REST API.

    Protected reads (open orders, balances) go through the dispatcher and
    may return stale data flagged as rate limited. Placement and
    cancellation never do: they either reach the exchange or raise.
    """

    def __init__(
        self,
        profile: ExchangeProfile,
        transport: TransportProtocol,
        dispatcher_config: DispatcherConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize the adapter with its own collaborators.

        Args:
            profile: Static exchange facts
            transport: HTTP collaborator for this exchange
            dispatcher_config: Default quota and an optional ban window override
            clock: Millisecond clock for the dispatcher

        """
        self.profile = profile
        self.transport = transport
        ban_window = profile.ban_window_seconds
        self.default_quota = DEFAULT_QUOTA_PER_MINUTE
        if dispatcher_config is not None:
            if dispatcher_config.ban_window_seconds is not None:
                ban_window = dispatcher_config.ban_window_seconds
            self.default_quota = dispatcher_config.default_quota_per_minute
        self.dispatcher = RateLimitedDispatcher(
            ban_window_seconds=ban_window, clock=clock, name=profile.name
        )
        self.codec: SymbolCodec = build_codec(profile.mapping, exchange=profile.name)
        self.store = OrderBookStore()
        self.normalizer = OrderNormalizer()
        self.context = NormalizationContext(profile.vocabulary, self.codec)
        self._limits: dict[CurrencyPair, PairLimits] = {}

    @property
    def name(self) -> str:
        return self.profile.name

    # -------------------------------------------------------------------------
    # Exchange specific
    # -------------------------------------------------------------------------

    @abstractmethod
    def fetch_markets(self) -> Sequence[MarketInfo]:
        """Fetch the exchange market list."""

    @abstractmethod
    def fetch_orderbook(self, symbol: str, market_type: MarketType) -> tuple[BookLevels, BookLevels]:
        """Fetch (bids, asks) for a native symbol."""

    @abstractmethod
    def fetch_ticker(self, symbol: str, pair: CurrencyPair) -> Ticker:
        """Fetch the ticker for a native symbol."""

    @abstractmethod
    def fetch_open_orders(self) -> Sequence[RawOrderProtocol]:
        """Fetch all active orders."""

    @abstractmethod
    def fetch_order(self, order_id: str, symbol: str | None) -> RawOrderProtocol:
        """Fetch one order, active or not."""

    @abstractmethod
    def fetch_balances(self) -> Sequence[RawBalanceProtocol]:
        """Fetch account balance rows."""

    @abstractmethod
    def submit_order(
        self,
        symbol: str,
        amount: Decimal,
        price: Decimal,
        side: OrderSide,
        order_type: OrderType,
    ) -> str:
        """Place a limit order and return the exchange order id."""

    @abstractmethod
    def submit_cancel(self, order_id: str, symbol: str | None) -> None:
        """Cancel an order."""

    def market_aliases(self) -> dict[str, str] | None:
        """Asset name to currency code map for table codecs, None to keep the current one."""
        return None

    def balance_aliases(self) -> dict[str, str]:
        """Asset name to currency code translation for balance rows."""
        return {}

    # -------------------------------------------------------------------------
    # Canonical surface
    # -------------------------------------------------------------------------

    def load_markets(self) -> list[CurrencyPair]:
        """
        Fetch the market list, build the symbol table and per-pair limits.

        Markets whose symbols cannot be decoded are skipped with a warning.
        """
        markets = self.fetch_markets()
        if isinstance(self.codec, TableCodec):
            self.codec.rebuild((m.row for m in markets), self.market_aliases())

        limits: dict[CurrencyPair, PairLimits] = {}
        for market in markets:
            try:
                pair = self.codec.to_pair(market.row.symbol)
            except SymbolError as e:
                logger.warning(f"{self.name}: skipping market {market.row.symbol}: {e}")
                continue
            limits[pair] = market.limits
        self._limits = limits
        logger.info(f"{self.name}: loaded {len(limits)} markets")
        return sorted(limits, key=lambda p: p.code)

    @property
    def pairs(self) -> list[CurrencyPair]:
        """Pairs loaded by the last load_markets()."""
        return sorted(self._limits, key=lambda p: p.code)

    def update_orderbook(
        self,
        pair: CurrencyPair,
        market_type: MarketType = MarketType.SPOT,
    ) -> OrderBookSnapshot:
        """Fetch a fresh book from the exchange and store it."""
        symbol = self.codec.to_symbol(pair)
        bids, asks = self.fetch_orderbook(symbol, market_type)
        snapshot = OrderBookSnapshot.from_levels(pair, bids, asks, market_type)
        return self.store.put(pair, market_type, snapshot)

    def get_orderbook(
        self,
        pair: CurrencyPair,
        market_type: MarketType = MarketType.SPOT,
    ) -> OrderBookSnapshot:
        """Stored book if there is one, otherwise fetch it."""
        try:
            return self.store.get(pair, market_type)
        except NotFound:
            return self.update_orderbook(pair, market_type)

    def get_ticker(self, pair: CurrencyPair) -> Ticker:
        return self.fetch_ticker(self.codec.to_symbol(pair), pair)

    def get_orders(self) -> DispatchResult[list[CanonicalOrder]]:
        """Active orders, possibly stale when the exchange is throttling us."""
        return self.dispatcher.dispatch(
            ORDERS_KEY,
            self.profile.quotas.orders or self.default_quota,
            lambda: self.normalizer.normalize_many(self.fetch_open_orders(), self.context),
            [],
        )

    def get_order(self, order_id: str, pair: CurrencyPair | None = None) -> CanonicalOrder:
        symbol = self.codec.to_symbol(pair) if pair is not None else None
        return self.normalizer.normalize(self.fetch_order(order_id, symbol), self.context)

    def get_account_info(self) -> DispatchResult[AccountInfo]:
        """Balances, possibly stale when the exchange is throttling us."""
        return self.dispatcher.dispatch(
            BALANCES_KEY,
            self.profile.quotas.balances or self.default_quota,
            lambda: self.normalizer.normalize_balances(
                self.fetch_balances(), self.name, self.balance_aliases()
            ),
            AccountInfo(exchange=self.name),
        )

    def new_order(
        self,
        pair: CurrencyPair,
        amount: Decimal,
        price: Decimal,
        side: OrderSide,
        order_type: OrderType = OrderType.EXCHANGE_LIMIT,
    ) -> PlacedOrder:
        """Place a limit order. Never goes through the dispatcher."""
        if order_type not in self.profile.order_types:
            raise UnsupportedOrderField("type", order_type.value, self.name)
        if amount <= 0 or price <= 0:
            raise ValueError(f"Amount and price must be positive, got {amount} @ {price}")
        symbol = self.codec.to_symbol(pair)
        order_id = self.submit_order(symbol, amount, price, side, order_type)
        logger.info(f"{self.name}: placed {side.value} {amount} {pair} @ {price} as {order_id}")
        return PlacedOrder(
            id=order_id,
            pair=pair,
            side=side,
            order_type=order_type,
            amount=amount,
            price=price,
        )

    def cancel_order(self, order_id: str, pair: CurrencyPair | None = None) -> None:
        """Cancel an order. Never goes through the dispatcher."""
        symbol = self.codec.to_symbol(pair) if pair is not None else None
        self.submit_cancel(order_id, symbol)
        logger.info(f"{self.name}: cancelled order {order_id}")

    def get_limits(self, pair: CurrencyPair) -> PairLimits:
        """Limits for a pair; defaults when the exchange publishes none."""
        return self._limits.get(pair) or PairLimits()
