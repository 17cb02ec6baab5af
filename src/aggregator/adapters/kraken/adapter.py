"""Kraken adapter."""

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from src.aggregator.adapters.base import BookLevels, ExchangeAdapter, MarketInfo
from src.aggregator.adapters.kraken.data import (
    KrakenAsset,
    KrakenAssetPair,
    KrakenBalance,
    KrakenDepth,
    KrakenOrder,
    KrakenTicker,
)
from src.aggregator.adapters.profiles import KRAKEN_PROFILE
from src.aggregator.codec.table import MarketRow
from src.aggregator.enums import MarketType, OrderSide, OrderType
from src.aggregator.errors import ProviderError, ProviderThrottled
from src.aggregator.model.limits import PairLimits
from src.aggregator.model.pair import CurrencyPair
from src.aggregator.model.ticker import Ticker

DARK_POOL_SUFFIX = ".d"


def check_response(status_code: int, payload: Any) -> Any:
    """Unwrap the {"error": [...], "result": ...} envelope."""
    if not isinstance(payload, dict):
        raise ProviderError(f"Unexpected response: {payload!r}", status_code=status_code)
    errors = payload.get("error") or []
    if errors:
        message = "; ".join(str(e) for e in errors)
        if KRAKEN_PROFILE.is_throttle_message(message):
            raise ProviderThrottled(message, code=str(errors[0]), status_code=status_code)
        raise ProviderError(message, code=str(errors[0]), status_code=status_code)
    if status_code >= 400:
        raise ProviderError(f"HTTP {status_code}", status_code=status_code)
    return payload.get("result")


class KrakenAdapter(ExchangeAdapter):
    """
    Kraken: opaque market names resolved through a table.

    Asset names are translated to currency codes with the altnames from
    /Assets (XXBT -> XBT). Dark pool markets are not loaded.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._asset_names: dict[str, str] = {}

    def market_aliases(self) -> dict[str, str] | None:
        return self._asset_names

    def balance_aliases(self) -> dict[str, str]:
        return self._asset_names

    def fetch_markets(self) -> Sequence[MarketInfo]:
        assets = self.transport.request("GET", "0/public/Assets")
        self._asset_names = {
            name: KrakenAsset.model_validate(info).altname for name, info in assets.items()
        }

        markets = []
        for name, info in self.transport.request("GET", "0/public/AssetPairs").items():
            if name.endswith(DARK_POOL_SUFFIX):
                continue
            pair = KrakenAssetPair.model_validate(info)
            limits = PairLimits(
                price_decimals=pair.pair_decimals,
                amount_decimals=pair.lot_decimals,
                **({"min_amount": pair.ordermin} if pair.ordermin is not None else {}),
            )
            markets.append(MarketInfo(MarketRow(name, pair.base, pair.quote, pair.altname), limits))
        return markets

    def fetch_orderbook(self, symbol: str, market_type: MarketType) -> tuple[BookLevels, BookLevels]:
        result = self.transport.request(
            "GET", "0/public/Depth", params={"pair": symbol, "count": self.profile.book_depth}
        )
        depth = KrakenDepth.model_validate(next(iter(result.values())))
        return depth.bid_levels, depth.ask_levels

    def fetch_ticker(self, symbol: str, pair: CurrencyPair) -> Ticker:
        result = self.transport.request("GET", "0/public/Ticker", params={"pair": symbol})
        ticker = KrakenTicker.model_validate(next(iter(result.values())))
        return Ticker(pair=pair, **ticker.decimals())

    def fetch_open_orders(self) -> Sequence[KrakenOrder]:
        result = self.transport.request("POST", "0/private/OpenOrders", auth=True)
        return [
            KrakenOrder.model_validate({**order, "txid": txid})
            for txid, order in (result.get("open") or {}).items()
        ]

    def fetch_order(self, order_id: str, symbol: str | None) -> KrakenOrder:
        result = self.transport.request(
            "POST", "0/private/QueryOrders", params={"txid": order_id}, auth=True
        )
        if order_id not in result:
            raise ProviderError(f"Order {order_id} not found")
        return KrakenOrder.model_validate({**result[order_id], "txid": order_id})

    def fetch_balances(self) -> Sequence[KrakenBalance]:
        result = self.transport.request("POST", "0/private/Balance", auth=True)
        return [KrakenBalance(asset=asset, amount=str(amount)) for asset, amount in result.items()]

    def submit_order(
        self,
        symbol: str,
        amount: Decimal,
        price: Decimal,
        side: OrderSide,
        order_type: OrderType,
    ) -> str:
        result = self.transport.request(
            "POST",
            "0/private/AddOrder",
            params={
                "pair": symbol,
                "type": side.value,
                "ordertype": "limit",
                "price": str(price),
                "volume": str(amount),
            },
            auth=True,
        )
        return ",".join(result["txid"])

    def submit_cancel(self, order_id: str, symbol: str | None) -> None:
        self.transport.request(
            "POST", "0/private/CancelOrder", params={"txid": order_id}, auth=True
        )
