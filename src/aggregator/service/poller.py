"""
Background order book polling.

Each adapter gets its own asyncio task that refreshes the books of its
pairs at a fixed interval. Blocking HTTP runs in a worker thread so one
slow exchange never delays another. Failed polls are logged and the
previous book stays in the store.
"""

import asyncio
import logging
from collections.abc import Iterable

from src.aggregator.adapters.base import ExchangeAdapter
from src.aggregator.config import PollingConfig
from src.aggregator.dispatch.dispatcher import DispatchResult
from src.aggregator.model.account import AccountInfo
from src.aggregator.model.order import CanonicalOrder
from src.aggregator.model.pair import CurrencyPair

logger = logging.getLogger(__name__)


class ExchangePoller:
    """
    Polling loop for one adapter.

    Optionally also refreshes balances and open orders through the
    adapter's dispatcher; stale results are logged once per streak and
    the last fresh value is kept.
    """

    def __init__(
        self,
        adapter: ExchangeAdapter,
        pairs: Iterable[CurrencyPair],
        config: PollingConfig | None = None,
        poll_account: bool = False,
    ) -> None:
        self.adapter = adapter
        self.pairs = list(pairs)
        self.config = config or PollingConfig()
        self.poll_account = poll_account

        self.account: AccountInfo | None = None
        self.orders: list[CanonicalOrder] | None = None
        self.is_running = False
        self.task: asyncio.Task[None] | None = None
        self._stale: set[str] = set()

    def start(self) -> asyncio.Task[None]:
        """Start polling in a new task on the running loop."""
        if self.task is not None and not self.task.done():
            logger.warning(f"{self.adapter.name}: poller already running")
            return self.task
        self.is_running = True
        self.task = asyncio.create_task(self.run(), name=f"poll-{self.adapter.name}")
        logger.info(f"{self.adapter.name}: polling {len(self.pairs)} pairs")
        return self.task

    async def stop(self) -> None:
        """Stop polling and wait for the task to finish."""
        self.is_running = False
        if self.task is None:
            return
        self.task.cancel()
        try:
            await self.task
        except asyncio.CancelledError:
            pass
        finally:
            self.task = None
        logger.info(f"{self.adapter.name}: polling stopped")

    async def run(self) -> None:
        while self.is_running:
            await self.poll_once()
            await asyncio.sleep(self.config.interval_seconds)

    async def poll_once(self) -> None:
        """Refresh every book (and the account, if enabled) once."""
        market_type = self.config.market_type
        for pair in self.pairs:
            try:
                await asyncio.to_thread(self.adapter.update_orderbook, pair, market_type)
            except Exception as e:
                logger.error(f"{self.adapter.name}: failed to update {pair} book: {e}")

        if not self.poll_account:
            return

        try:
            account = await asyncio.to_thread(self.adapter.get_account_info)
            if self._track("balances", account) or self.account is None:
                self.account = account.value
        except Exception as e:
            logger.error(f"{self.adapter.name}: failed to poll balances: {e}")

        try:
            orders = await asyncio.to_thread(self.adapter.get_orders)
            if self._track("orders", orders) or self.orders is None:
                self.orders = orders.value
        except Exception as e:
            logger.error(f"{self.adapter.name}: failed to poll orders: {e}")

    def _track(self, key: str, result: DispatchResult) -> bool:
        """Log streak transitions; True when the result is fresh."""
        if result.rate_limited:
            if key not in self._stale:
                self._stale.add(key)
                reason = result.reason.value if result.reason else "rate limited"
                logger.warning(f"{self.adapter.name}: serving stale {key} ({reason})")
            return False
        if key in self._stale:
            self._stale.discard(key)
            logger.info(f"{self.adapter.name}: {key} fresh again")
        return True


class PollingService:
    """Runs one ExchangePoller per adapter."""

    def __init__(self, config: PollingConfig | None = None) -> None:
        self.config = config or PollingConfig()
        self.pollers: dict[str, ExchangePoller] = {}

    def add(
        self,
        adapter: ExchangeAdapter,
        pairs: Iterable[CurrencyPair],
        poll_account: bool = False,
    ) -> ExchangePoller:
        if adapter.name in self.pollers:
            raise ValueError(f"Adapter {adapter.name} already registered")
        poller = ExchangePoller(adapter, pairs, self.config, poll_account)
        self.pollers[adapter.name] = poller
        return poller

    def start(self) -> None:
        for poller in self.pollers.values():
            poller.start()

    async def stop(self) -> None:
        await asyncio.gather(*(poller.stop() for poller in self.pollers.values()))
