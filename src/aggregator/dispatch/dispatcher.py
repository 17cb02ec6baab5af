"""
Rate-limited dispatcher.

Protected exchange calls (balances, open orders) go through a dispatcher
that enforces a per-endpoint quota and backs off from the whole exchange
when it signals throttling. Instead of failing, a skipped call returns the
last good response for the same key, flagged as rate limited.

Per key the dispatcher is in one of three states:

- Ready: the quota interval has elapsed and no ban is active. The call is
  made outside the lock. Success caches the value; a ProviderThrottled
  error starts a ban; any other error propagates with no state change.
- Throttled: the previous call was too recent, or one is still in flight.
- Banned: the exchange asked us to back off; every key is skipped.
"""

import logging
import threading
import time
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from src.aggregator.enums import StaleReason
from src.aggregator.errors import ProviderThrottled, RateLimited

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Default dispatcher clock in milliseconds."""
    return time.monotonic() * 1000


class RateLimitState(BaseModel):
    """Read-only view of one key's rate limit state."""

    key: str
    min_interval_ms: float
    last_call_ms: float | None = None
    ban_until_ms: float | None = None
    in_flight: bool = False

    model_config = ConfigDict(frozen=True)


class CachedResponse(BaseModel):
    """Last successfully decoded payload for a key."""

    key: str
    value: Any
    stored_at_ms: float

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class DispatchResult(BaseModel, Generic[T]):
    """
    Outcome of a dispatch.

    When rate_limited is set the value is stale: the cached response for the
    key if there is one, otherwise the caller's fallback.
    """

    key: str
    value: T
    rate_limited: bool = False
    reason: StaleReason | None = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def unwrap_fresh(self) -> T:
        """
        Return the value, refusing stale data.

        Raises:
            RateLimited: If the value did not come from this call

        """
        if self.rate_limited:
            reason = self.reason.value if self.reason else StaleReason.THROTTLED.value
            raise RateLimited(self.key, self.value, reason)
        return self.value


class RateLimitedDispatcher:
    """
    Per-adapter throttle and last-known-good cache for protected calls.

    One dispatcher belongs to one adapter. The ban is global to the
    dispatcher since exchanges ban by API key or IP, not by endpoint.
    """

    def __init__(
        self,
        ban_window_seconds: float = 60.0,
        clock: Clock | None = None,
        name: str = "dispatcher",
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            ban_window_seconds: Back-off after a provider throttle signal
            clock: Millisecond clock, injectable for deterministic tests
            name: Label used in log messages, usually the exchange name

        """
        self.ban_window_ms = ban_window_seconds * 1000
        self.name = name
        self._clock = clock or monotonic_ms
        self._lock = threading.Lock()
        self._last_call: dict[str, float] = {}
        self._intervals: dict[str, float] = {}
        self._cache: dict[str, CachedResponse] = {}
        self._in_flight: set[str] = set()
        self._ban_until: float | None = None

    def dispatch(
        self,
        key: str,
        quota_per_minute: int,
        call: Callable[[], T],
        fallback: T,
    ) -> DispatchResult[T]:
        """
        Perform `call` if the key's quota and the ban window allow it.

        Args:
            key: Endpoint identity, e.g. "GET /v1/balances"
            quota_per_minute: Allowed calls per minute for this key
            call: Zero-argument function doing the network request
            fallback: Value returned when skipped and nothing is cached

        Returns:
            Fresh result, or the stale value with rate_limited set

        """
        if quota_per_minute <= 0:
            raise ValueError(f"Quota must be positive, got {quota_per_minute}")
        interval = 60000 / quota_per_minute

        with self._lock:
            now = self._clock()
            self._intervals[key] = interval
            reason = self._skip_reason(key, now, interval)
            if reason is not None:
                return self._stale(key, fallback, reason)
            self._in_flight.add(key)

        try:
            value = call()
        except ProviderThrottled as e:
            with self._lock:
                self._in_flight.discard(key)
                self._ban_until = self._clock() + self.ban_window_ms
                logger.warning(
                    f"{self.name}: provider throttled '{key}' ({e}); "
                    f"backing off for {self.ban_window_ms / 1000:.0f}s"
                )
                return self._stale(key, fallback, StaleReason.PROVIDER_THROTTLE)
        except BaseException:
            with self._lock:
                self._in_flight.discard(key)
            raise

        with self._lock:
            self._in_flight.discard(key)
            self._last_call[key] = now
            self._ban_until = None
            self._cache[key] = CachedResponse(key=key, value=value, stored_at_ms=now)
        return DispatchResult(key=key, value=value)

    def _skip_reason(self, key: str, now: float, interval: float) -> StaleReason | None:
        if self._ban_until is not None and now < self._ban_until:
            return StaleReason.BANNED
        if key in self._in_flight:
            return StaleReason.THROTTLED
        last = self._last_call.get(key)
        if last is not None and now - last < interval:
            return StaleReason.THROTTLED
        return None

    def _stale(self, key: str, fallback: T, reason: StaleReason) -> DispatchResult[T]:
        cached = self._cache.get(key)
        value = cached.value if cached is not None else fallback
        logger.debug(f"{self.name}: serving stale '{key}' ({reason.value})")
        return DispatchResult(key=key, value=value, rate_limited=True, reason=reason)

    def state(self, key: str) -> RateLimitState | None:
        """Snapshot of the rate limit state for a key, None if never dispatched."""
        with self._lock:
            if key not in self._intervals:
                return None
            return RateLimitState(
                key=key,
                min_interval_ms=self._intervals[key],
                last_call_ms=self._last_call.get(key),
                ban_until_ms=self._ban_until,
                in_flight=key in self._in_flight,
            )

    def cached(self, key: str) -> CachedResponse | None:
        """Last good response for a key, if any."""
        with self._lock:
            return self._cache.get(key)

    @property
    def is_banned(self) -> bool:
        """Whether the ban window is active right now."""
        with self._lock:
            return self._ban_until is not None and self._clock() < self._ban_until
