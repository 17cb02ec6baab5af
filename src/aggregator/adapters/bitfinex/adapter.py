"""Bitfinex adapter (REST API v1)."""

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from src.aggregator.adapters.base import BookLevels, ExchangeAdapter, MarketInfo
from src.aggregator.adapters.bitfinex.data import (
    BitfinexBalance,
    BitfinexBook,
    BitfinexOrder,
    BitfinexTicker,
    SymbolDetails,
)
from src.aggregator.adapters.profiles import BITFINEX_PROFILE
from src.aggregator.codec.table import MarketRow
from src.aggregator.enums import MarketType, OrderSide, OrderType
from src.aggregator.errors import ProviderError, ProviderThrottled
from src.aggregator.model.limits import PairLimits
from src.aggregator.model.pair import CurrencyPair
from src.aggregator.model.ticker import Ticker

ORDER_TYPES = {
    OrderType.EXCHANGE_LIMIT: "exchange limit",
    OrderType.MARGIN_LIMIT: "limit",
}


def check_response(status_code: int, payload: Any) -> Any:
    """
    Bitfinex reports errors as {"message": ...} or {"error": ...}.

    ERR_RATE_LIMIT means the IP is blocked for 10-60 seconds.
    """
    if isinstance(payload, dict):
        message = payload.get("error") or payload.get("message")
        if message:
            if BITFINEX_PROFILE.is_throttle_message(str(message)):
                raise ProviderThrottled(str(message), code=str(message), status_code=status_code)
            raise ProviderError(str(message), status_code=status_code)
    if status_code >= 400:
        raise ProviderError(f"HTTP {status_code}", status_code=status_code)
    return payload


class BitfinexAdapter(ExchangeAdapter):
    """Bitfinex: fixed-width lower-case symbols ("btcusd"), wallet balances."""

    def fetch_markets(self) -> Sequence[MarketInfo]:
        payload = self.transport.request("GET", "symbols_details")
        details = [SymbolDetails.model_validate(d) for d in payload]
        return [
            MarketInfo(
                MarketRow(d.pair, d.pair[:3], d.pair[3:]),
                PairLimits(price_decimals=d.price_precision, min_amount=d.minimum_order_size),
            )
            for d in details
        ]

    def fetch_orderbook(self, symbol: str, market_type: MarketType) -> tuple[BookLevels, BookLevels]:
        depth = self.profile.book_depth
        payload = self.transport.request(
            "GET", f"book/{symbol}", params={"limit_bids": depth, "limit_asks": depth}
        )
        book = BitfinexBook.model_validate(payload)
        return [e.level for e in book.bids], [e.level for e in book.asks]

    def fetch_ticker(self, symbol: str, pair: CurrencyPair) -> Ticker:
        ticker = BitfinexTicker.model_validate(self.transport.request("GET", f"pubticker/{symbol}"))
        return Ticker(pair=pair, timestamp=ticker.timestamp, **ticker.decimals())

    def fetch_open_orders(self) -> Sequence[BitfinexOrder]:
        payload = self.transport.request("POST", "orders", auth=True)
        return [BitfinexOrder.model_validate(o) for o in payload]

    def fetch_order(self, order_id: str, symbol: str | None) -> BitfinexOrder:
        payload = self.transport.request(
            "POST", "order/status", params={"order_id": int(order_id)}, auth=True
        )
        return BitfinexOrder.model_validate(payload)

    def fetch_balances(self) -> Sequence[BitfinexBalance]:
        payload = self.transport.request("POST", "balances", auth=True)
        return [BitfinexBalance.model_validate(b) for b in payload]

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
            "order/new",
            params={
                "symbol": symbol,
                "amount": str(amount),
                "price": str(price),
                "exchange": "bitfinex",
                "side": side.value,
                "type": ORDER_TYPES[order_type],
                "is_hidden": False,
            },
            auth=True,
        )
        return str(payload.get("order_id") or payload["id"])

    def submit_cancel(self, order_id: str, symbol: str | None) -> None:
        self.transport.request(
            "POST", "order/cancel", params={"order_id": int(order_id)}, auth=True
        )
