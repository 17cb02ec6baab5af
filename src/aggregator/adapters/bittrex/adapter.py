"""Bittrex adapter (REST API v1.1)."""

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from src.aggregator.adapters.base import BookLevels, ExchangeAdapter, MarketInfo
from src.aggregator.adapters.bittrex.data import (
    BittrexBalance,
    BittrexBook,
    BittrexMarket,
    BittrexOrder,
    BittrexTicker,
)
from src.aggregator.codec.table import MarketRow
from src.aggregator.enums import MarketType, OrderSide, OrderType
from src.aggregator.errors import ProviderError
from src.aggregator.model.limits import PairLimits
from src.aggregator.model.pair import CurrencyPair
from src.aggregator.model.ticker import Ticker

PLACE_PATHS = {
    OrderSide.BUY: "market/buylimit",
    OrderSide.SELL: "market/selllimit",
}


def check_response(status_code: int, payload: Any) -> Any:
    """Unwrap the {"success", "message", "result"} envelope."""
    if not isinstance(payload, dict) or "success" not in payload:
        raise ProviderError(f"Unexpected response: {payload!r}", status_code=status_code)
    if not payload["success"]:
        message = payload.get("message") or "request failed"
        raise ProviderError(message, code=message, status_code=status_code)
    return payload.get("result")


class BittrexAdapter(ExchangeAdapter):
    """
    Bittrex: "-" delimited, quote currency first.

    (ETH, BTC) is traded on the "BTC-ETH" market.
    """

    def fetch_markets(self) -> Sequence[MarketInfo]:
        payload = self.transport.request("GET", "public/getmarkets")
        markets = [BittrexMarket.model_validate(m) for m in payload]
        return [
            MarketInfo(
                MarketRow(m.market_name, m.market_currency, m.base_currency),
                PairLimits(min_amount=m.min_trade_size),
            )
            for m in markets
            if m.is_active
        ]

    def fetch_orderbook(self, symbol: str, market_type: MarketType) -> tuple[BookLevels, BookLevels]:
        payload = self.transport.request(
            "GET",
            "public/getorderbook",
            params={"market": symbol, "type": "both", "depth": self.profile.book_depth},
        )
        book = BittrexBook.model_validate(payload)
        return [e.level for e in book.buy or []], [e.level for e in book.sell or []]

    def fetch_ticker(self, symbol: str, pair: CurrencyPair) -> Ticker:
        payload = self.transport.request("GET", "public/getticker", params={"market": symbol})
        return Ticker(pair=pair, **BittrexTicker.model_validate(payload).decimals())

    def fetch_open_orders(self) -> Sequence[BittrexOrder]:
        payload = self.transport.request("GET", "market/getopenorders", auth=True)
        return [BittrexOrder.model_validate(o) for o in payload or []]

    def fetch_order(self, order_id: str, symbol: str | None) -> BittrexOrder:
        payload = self.transport.request(
            "GET", "account/getorder", params={"uuid": order_id}, auth=True
        )
        return BittrexOrder.model_validate(payload)

    def fetch_balances(self) -> Sequence[BittrexBalance]:
        payload = self.transport.request("GET", "account/getbalances", auth=True)
        return [BittrexBalance.model_validate(b) for b in payload or []]

    def submit_order(
        self,
        symbol: str,
        amount: Decimal,
        price: Decimal,
        side: OrderSide,
        order_type: OrderType,
    ) -> str:
        payload = self.transport.request(
            "GET",
            PLACE_PATHS[side],
            params={"market": symbol, "quantity": str(amount), "rate": str(price)},
            auth=True,
        )
        return str(payload["uuid"])

    def submit_cancel(self, order_id: str, symbol: str | None) -> None:
        self.transport.request("GET", "market/cancel", params={"uuid": order_id}, auth=True)
