"""Test helpers for aggregator tests."""

from collections.abc import Callable
from decimal import Decimal
from typing import Any

from src.aggregator.errors import AggregatorError


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms

    def set(self, ms: float) -> None:
        self.now = ms


class FakeTransport:
    """
    Transport that answers from a route table instead of the network.

    Routes map (method, path) to a payload or to a callable receiving the
    params. Exceptions in the table are raised. Every call is recorded.
    """

    def __init__(self, routes: dict[tuple[str, str], Any] | None = None) -> None:
        self.routes: dict[tuple[str, str], Any] = dict(routes or {})
        self.calls: list[dict[str, Any]] = []
        self.has_credentials = True

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        auth: bool = False,
    ) -> Any:
        self.calls.append({"method": method, "path": path, "params": params, "auth": auth})
        try:
            answer = self.routes[(method, path)]
        except KeyError:
            raise AggregatorError(f"No route for {method} {path}") from None
        if isinstance(answer, Exception):
            raise answer
        if callable(answer):
            return answer(params or {})
        return answer

    def count(self, method: str, path: str) -> int:
        return sum(1 for c in self.calls if c["method"] == method and c["path"] == path)


class RawOrderBuilder:
    """Builder for protocol-compliant raw orders."""

    def __init__(self) -> None:
        """Initialize with sensible defaults (an open Kraken-like order)."""
        self._data: dict[str, Any] = {
            "order_id": "O-1",
            "symbol": "ETHBTC",
            "raw_status": "open",
            "raw_side": "buy",
            "raw_type": "limit",
            "original_amount": Decimal("2.0"),
            "reported_amount": Decimal("0"),
            "limit_price": Decimal("0.05"),
            "average_price": None,
            "created": "1500000000.987",
        }

    def with_status(self, status: str) -> "RawOrderBuilder":
        self._data["raw_status"] = status
        return self

    def with_side(self, side: str) -> "RawOrderBuilder":
        self._data["raw_side"] = side
        return self

    def with_type(self, order_type: str) -> "RawOrderBuilder":
        self._data["raw_type"] = order_type
        return self

    def with_amounts(self, original: str, reported: str) -> "RawOrderBuilder":
        self._data["original_amount"] = Decimal(original)
        self._data["reported_amount"] = Decimal(reported)
        return self

    def with_prices(self, limit: str, average: str | None = None) -> "RawOrderBuilder":
        self._data["limit_price"] = Decimal(limit)
        self._data["average_price"] = Decimal(average) if average is not None else None
        return self

    def with_created(self, created: str | int | float) -> "RawOrderBuilder":
        self._data["created"] = created
        return self

    def with_symbol(self, symbol: str) -> "RawOrderBuilder":
        self._data["symbol"] = symbol
        return self

    def build(self) -> "SimpleRawOrder":
        return SimpleRawOrder(**self._data)


class SimpleRawOrder:
    """Plain object satisfying RawOrderProtocol."""

    def __init__(self, **fields: Any) -> None:
        self.__dict__.update(fields)


class SimpleRawBalance:
    """Plain object satisfying RawBalanceProtocol."""

    def __init__(
        self,
        currency: str,
        total: str | None = None,
        available: str | None = None,
        hold: str | None = None,
    ) -> None:
        self.currency = currency
        self.total = Decimal(total) if total is not None else None
        self.available = Decimal(available) if available is not None else None
        self.hold = Decimal(hold) if hold is not None else None


def counting_call(values: list[Any]) -> tuple[Callable[[], Any], list[int]]:
    """A zero-argument call returning `values` in turn, plus its call counter."""
    counter = [0]

    def call() -> Any:
        value = values[min(counter[0], len(values) - 1)]
        counter[0] += 1
        if isinstance(value, Exception):
            raise value
        return value

    return call, counter


