"""Binance adapter (REST API v3)."""

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from src.aggregator.adapters.base import BookLevels, ExchangeAdapter, MarketInfo
from src.aggregator.adapters.binance.data import (
    BinanceBalance,
    BinanceBook,
    BinanceOrder,
    BinanceSymbol,
    BinanceTicker,
)
from src.aggregator.adapters.profiles import BINANCE_PROFILE
from src.aggregator.codec.table import MarketRow
from src.aggregator.enums import MarketType, OrderSide, OrderType
from src.aggregator.errors import ProviderError, ProviderThrottled
from src.aggregator.model.pair import CurrencyPair
from src.aggregator.model.ticker import Ticker

# HTTP 418: the IP was auto-banned after ignoring 429s
BAN_STATUS_CODES = (418, 429)


def check_response(status_code: int, payload: Any) -> Any:
    """Binance errors are {"code": <negative int>, "msg": ...}."""
    if isinstance(payload, dict) and isinstance(payload.get("code"), int) and payload["code"] < 0:
        code = payload["code"]
        message = str(payload.get("msg") or f"error {code}")
        if status_code in BAN_STATUS_CODES or BINANCE_PROFILE.is_throttle_message(str(code)):
            raise ProviderThrottled(message, code=code, status_code=status_code)
        raise ProviderError(message, code=code, status_code=status_code)
    if status_code in BAN_STATUS_CODES:
        raise ProviderThrottled(f"HTTP {status_code}", status_code=status_code)
    if status_code >= 400:
        raise ProviderError(f"HTTP {status_code}", status_code=status_code)
    return payload


class BinanceAdapter(ExchangeAdapter):
    """
    Binance: delimiter-less symbols of varying width, decoded by table.

    Single-order calls need the market symbol alongside the order id.
    """

    def fetch_markets(self) -> Sequence[MarketInfo]:
        payload = self.transport.request("GET", "api/v3/exchangeInfo")
        symbols = [BinanceSymbol.model_validate(s) for s in payload.get("symbols", [])]
        return [
            MarketInfo(MarketRow(s.symbol, s.base_asset, s.quote_asset), s.limits)
            for s in symbols
            if s.is_trading
        ]

    def fetch_orderbook(self, symbol: str, market_type: MarketType) -> tuple[BookLevels, BookLevels]:
        payload = self.transport.request(
            "GET", "api/v3/depth", params={"symbol": symbol, "limit": self.profile.book_depth}
        )
        book = BinanceBook.model_validate(payload)
        return book.bid_levels, book.ask_levels

    def fetch_ticker(self, symbol: str, pair: CurrencyPair) -> Ticker:
        payload = self.transport.request("GET", "api/v3/ticker/24hr", params={"symbol": symbol})
        return Ticker(pair=pair, **BinanceTicker.model_validate(payload).decimals())

    def fetch_open_orders(self) -> Sequence[BinanceOrder]:
        payload = self.transport.request("GET", "api/v3/openOrders", auth=True)
        return [BinanceOrder.model_validate(o) for o in payload]

    def fetch_order(self, order_id: str, symbol: str | None) -> BinanceOrder:
        payload = self.transport.request(
            "GET", "api/v3/order", params=self._order_params(order_id, symbol), auth=True
        )
        return BinanceOrder.model_validate(payload)

    def fetch_balances(self) -> Sequence[BinanceBalance]:
        payload = self.transport.request("GET", "api/v3/account", auth=True)
        return [BinanceBalance.model_validate(b) for b in payload.get("balances", [])]

    def submit_order(
        self,
        symbol: str,
        amount: Decimal,
        price: Decimal,
        side: OrderSide,
        order_type: OrderType,
    ) -> str:
        payload = self.transport.request(
            "POST",
            "api/v3/order",
            params={
                "symbol": symbol,
                "side": side.value.upper(),
                "type": "LIMIT",
                "timeInForce": "GTC",
                "quantity": str(amount),
                "price": str(price),
            },
            auth=True,
        )
        return str(payload["orderId"])

    def submit_cancel(self, order_id: str, symbol: str | None) -> None:
        self.transport.request(
            "DELETE", "api/v3/order", params=self._order_params(order_id, symbol), auth=True
        )

    def _order_params(self, order_id: str, symbol: str | None) -> dict[str, Any]:
        if symbol is None:
            raise ValueError(f"{self.name} needs the currency pair of order {order_id}")
        return {"symbol": symbol, "orderId": int(order_id)}
