"""
Integration tests for the exchange adapters.

Each adapter runs against a fake transport answering with recorded-style
exchange payloads, exercising market loading, store-first order books,
dispatcher-protected reads and order placement together.
"""

from decimal import Decimal

import pytest

from src.aggregator.adapters import BinanceAdapter, BitfinexAdapter, BittrexAdapter, KrakenAdapter
from src.aggregator.adapters.profiles import (
    BINANCE_PROFILE,
    BITFINEX_PROFILE,
    BITTREX_PROFILE,
    KRAKEN_PROFILE,
    PROFILES,
)
from src.aggregator.config import AggregatorConfig, DispatcherConfig, ExchangeCredentials
from src.aggregator.enums import Exchange, OrderSide, OrderStatus, OrderType, StaleReason
from src.aggregator.errors import (
    CredentialsMissing,
    ProviderThrottled,
    UnknownMarket,
    UnsupportedOrderField,
)
from src.aggregator.model import CurrencyPair
from src.aggregator.service import create_adapter
from tests.unit.aggregator.helpers import FakeClock, FakeTransport

XBT_USD = CurrencyPair.of("XBT", "USD")
ETH_XBT = CurrencyPair.of("ETH", "XBT")
ETH_BTC = CurrencyPair.of("ETH", "BTC")
BTC_USD = CurrencyPair.of("BTC", "USD")

KRAKEN_ROUTES = {
    ("GET", "0/public/Assets"): {
        "XXBT": {"altname": "XBT"},
        "ZUSD": {"altname": "USD"},
        "XETH": {"altname": "ETH"},
    },
    ("GET", "0/public/AssetPairs"): {
        "XXBTZUSD": {
            "altname": "XBTUSD",
            "base": "XXBT",
            "quote": "ZUSD",
            "pair_decimals": 1,
            "lot_decimals": 8,
            "ordermin": "0.0001",
        },
        "XXBTZUSD.d": {"altname": "XBTUSD.d", "base": "XXBT", "quote": "ZUSD"},
        "XETHXXBT": {"altname": "ETHXBT", "base": "XETH", "quote": "XXBT"},
        "XLTCZEUR": {"altname": "LTCEUR", "base": "XLTC", "quote": "ZEUR"},
    },
    ("GET", "0/public/Depth"): {
        "XXBTZUSD": {
            "bids": [["99.0", "2.0", 1500000000], ["100.0", "1.5", 1500000000]],
            "asks": [["101.0", "2.0", 1500000000]],
        }
    },
    ("GET", "0/public/Ticker"): {
        "XXBTZUSD": {
            "a": ["101.0", "1", "1.000"],
            "b": ["100.0", "1", "1.000"],
            "c": ["100.5", "0.1"],
            "v": ["10", "250"],
            "h": ["102", "105"],
            "l": ["98", "95"],
        }
    },
    ("POST", "0/private/OpenOrders"): {
        "open": {
            "OABC-1": {
                "status": "open",
                "opentm": 1500000000.25,
                "descr": {"pair": "XBTUSD", "type": "buy", "ordertype": "limit", "price": "100.0"},
                "vol": "1.0",
                "vol_exec": "0.25",
                "price": "99.9",
            }
        }
    },
    ("POST", "0/private/Balance"): {"XXBT": "1.5", "ZUSD": "100.0"},
    ("POST", "0/private/AddOrder"): {"descr": {"order": "buy 1.0 XBTUSD"}, "txid": ["ONEW-1"]},
    ("POST", "0/private/CancelOrder"): {"count": 1},
}


@pytest.fixture
def kraken(clock: FakeClock) -> tuple[KrakenAdapter, FakeTransport]:
    transport = FakeTransport(KRAKEN_ROUTES)
    adapter = KrakenAdapter(KRAKEN_PROFILE, transport, clock=clock)
    adapter.load_markets()
    return adapter, transport


class TestKrakenFlow:
    """Test the Kraken adapter end to end."""

    def test_load_markets(self, kraken: tuple[KrakenAdapter, FakeTransport]) -> None:
        """Test that dark pool and unresolvable markets are skipped."""
        adapter, _ = kraken

        assert adapter.pairs == [ETH_XBT, XBT_USD]
        limits = adapter.get_limits(XBT_USD)
        assert limits.price_decimals == 1
        assert limits.min_amount == Decimal("0.0001")

    def test_orderbook_is_served_from_store(
        self, kraken: tuple[KrakenAdapter, FakeTransport]
    ) -> None:
        """Test that the first read fetches and later reads hit the store."""
        adapter, transport = kraken

        first = adapter.get_orderbook(XBT_USD)
        second = adapter.get_orderbook(XBT_USD)

        assert first.best_bid == Decimal("100.0")
        assert first.best_ask == Decimal("101.0")
        assert second is first
        assert transport.count("GET", "0/public/Depth") == 1
        assert transport.calls[-1]["params"]["pair"] == "XXBTZUSD"

    def test_ticker(self, kraken: tuple[KrakenAdapter, FakeTransport]) -> None:
        adapter, _ = kraken

        ticker = adapter.get_ticker(XBT_USD)

        assert ticker.last == Decimal("100.5")
        assert ticker.volume == Decimal("250")
        assert ticker.spread == Decimal("1.0")

    def test_orders_throttled_by_quota(
        self, kraken: tuple[KrakenAdapter, FakeTransport], clock: FakeClock
    ) -> None:
        """Test that the default quota serves cached orders within six seconds."""
        adapter, transport = kraken

        fresh = adapter.get_orders()
        clock.advance(1000)
        stale = adapter.get_orders()

        assert not fresh.rate_limited
        order = fresh.value[0]
        assert order.id == "OABC-1"
        assert order.pair == XBT_USD
        assert order.status is OrderStatus.ACTIVE
        assert order.filled_amount == Decimal("0.25")
        assert order.rate == Decimal("100.0")
        assert order.created_at == 1500000000

        assert stale.rate_limited
        assert stale.reason is StaleReason.THROTTLED
        assert stale.value == fresh.value
        assert transport.count("POST", "0/private/OpenOrders") == 1

    def test_throttle_bans_all_protected_reads(
        self, kraken: tuple[KrakenAdapter, FakeTransport], clock: FakeClock
    ) -> None:
        """Test that a throttle error on one endpoint backs off from the other."""
        adapter, transport = kraken
        transport.routes[("POST", "0/private/OpenOrders")] = ProviderThrottled(
            "EAPI:Rate limit exceeded"
        )

        orders = adapter.get_orders()
        clock.advance(10_000)
        account = adapter.get_account_info()

        assert orders.value == []
        assert orders.reason is StaleReason.PROVIDER_THROTTLE
        assert account.reason is StaleReason.BANNED
        assert account.value.balances == {}
        assert transport.count("POST", "0/private/Balance") == 0

    def test_balances_use_asset_altnames(
        self, kraken: tuple[KrakenAdapter, FakeTransport]
    ) -> None:
        adapter, _ = kraken

        info = adapter.get_account_info().unwrap_fresh()

        assert info.currencies == ["USD", "XBT"]
        assert info.balance("XBT").available == Decimal("1.5")

    def test_place_and_cancel(self, kraken: tuple[KrakenAdapter, FakeTransport]) -> None:
        """Test that placement and cancellation bypass the dispatcher."""
        adapter, transport = kraken

        placed = adapter.new_order(XBT_USD, Decimal("1.0"), Decimal("100.0"), OrderSide.BUY)
        adapter.cancel_order(placed.id)
        adapter.cancel_order(placed.id)

        assert placed.id == "ONEW-1"
        assert transport.calls[-3]["params"]["pair"] == "XXBTZUSD"
        assert transport.count("POST", "0/private/CancelOrder") == 2

    def test_rejected_orders(self, kraken: tuple[KrakenAdapter, FakeTransport]) -> None:
        """Test validation before any request is sent."""
        adapter, transport = kraken
        before = len(transport.calls)

        with pytest.raises(UnsupportedOrderField):
            adapter.new_order(
                XBT_USD, Decimal("1"), Decimal("100"), OrderSide.BUY, OrderType.MARGIN_LIMIT
            )
        with pytest.raises(ValueError):
            adapter.new_order(XBT_USD, Decimal("0"), Decimal("100"), OrderSide.BUY)
        with pytest.raises(UnknownMarket):
            adapter.new_order(BTC_USD, Decimal("1"), Decimal("100"), OrderSide.BUY)

        assert len(transport.calls) == before


class TestBittrexFlow:
    """Test the Bittrex adapter with inverted symbols."""

    @pytest.fixture
    def bittrex(self) -> tuple[BittrexAdapter, FakeTransport]:
        transport = FakeTransport(
            {
                ("GET", "public/getmarkets"): [
                    {
                        "MarketName": "BTC-ETH",
                        "MarketCurrency": "ETH",
                        "BaseCurrency": "BTC",
                        "MinTradeSize": 0.01,
                        "IsActive": True,
                    },
                    {
                        "MarketName": "BTC-OLD",
                        "MarketCurrency": "OLD",
                        "BaseCurrency": "BTC",
                        "IsActive": False,
                    },
                ],
                ("GET", "public/getorderbook"): {
                    "buy": [{"Quantity": 3, "Rate": 0.049}],
                    "sell": None,
                },
                ("GET", "account/getorder"): {
                    "OrderUuid": "u-1",
                    "Exchange": "BTC-ETH",
                    "Type": "LIMIT_SELL",
                    "Quantity": 10,
                    "QuantityRemaining": 4,
                    "Limit": 0.05,
                    "PricePerUnit": 0.051,
                    "Opened": "2017-07-14T02:40:00.123",
                    "Closed": "2017-07-14T03:00:00",
                },
                ("GET", "market/selllimit"): {"uuid": "u-2"},
            }
        )
        adapter = BittrexAdapter(BITTREX_PROFILE, transport)
        adapter.load_markets()
        return adapter, transport

    def test_markets_and_book(self, bittrex: tuple[BittrexAdapter, FakeTransport]) -> None:
        """Test inactive markets are dropped and a one-sided book is valid."""
        adapter, transport = bittrex

        book = adapter.get_orderbook(ETH_BTC)

        assert adapter.pairs == [ETH_BTC]
        assert adapter.get_limits(ETH_BTC).min_amount == Decimal("0.01")
        assert book.best_bid == Decimal("0.049")
        assert book.asks == ()
        assert transport.calls[-1]["params"]["market"] == "BTC-ETH"

    def test_closed_partial_order_is_aborted(
        self, bittrex: tuple[BittrexAdapter, FakeTransport]
    ) -> None:
        adapter, _ = bittrex

        order = adapter.get_order("u-1")

        assert order.pair == ETH_BTC
        assert order.side is OrderSide.SELL
        assert order.status is OrderStatus.ABORTED
        assert order.filled_amount == Decimal("6")
        assert order.rate == Decimal("0.051")
        assert order.created_at == 1500000000

    def test_sell_limit(self, bittrex: tuple[BittrexAdapter, FakeTransport]) -> None:
        adapter, transport = bittrex

        placed = adapter.new_order(ETH_BTC, Decimal("2"), Decimal("0.06"), OrderSide.SELL)

        assert placed.id == "u-2"
        assert transport.calls[-1]["params"] == {"market": "BTC-ETH", "quantity": "2", "rate": "0.06"}
        assert transport.calls[-1]["auth"]


class TestBinanceFlow:
    """Test the Binance adapter with table symbols and exchange filters."""

    @pytest.fixture
    def binance(self) -> tuple[BinanceAdapter, FakeTransport]:
        transport = FakeTransport(
            {
                ("GET", "api/v3/exchangeInfo"): {
                    "symbols": [
                        {
                            "symbol": "ETHBTC",
                            "status": "TRADING",
                            "baseAsset": "ETH",
                            "quoteAsset": "BTC",
                            "filters": [
                                {"filterType": "PRICE_FILTER", "tickSize": "0.00000100"},
                                {
                                    "filterType": "LOT_SIZE",
                                    "stepSize": "0.00100000",
                                    "minQty": "0.00100000",
                                },
                                {"filterType": "MIN_NOTIONAL", "minNotional": "0.00010000"},
                            ],
                        },
                        {
                            "symbol": "DOGEUSDT",
                            "status": "TRADING",
                            "baseAsset": "DOGE",
                            "quoteAsset": "USDT",
                        },
                        {
                            "symbol": "OLDBTC",
                            "status": "BREAK",
                            "baseAsset": "OLD",
                            "quoteAsset": "BTC",
                        },
                    ]
                },
                ("GET", "api/v3/order"): {
                    "symbol": "ETHBTC",
                    "orderId": 7,
                    "price": "0.05",
                    "origQty": "2",
                    "executedQty": "2",
                    "cummulativeQuoteQty": "0.098",
                    "status": "FILLED",
                    "type": "LIMIT",
                    "side": "SELL",
                    "time": 1500000000123,
                },
                ("GET", "api/v3/account"): {
                    "balances": [{"asset": "BTC", "free": "1", "locked": "0.5"}]
                },
                ("DELETE", "api/v3/order"): {"orderId": 7},
            }
        )
        adapter = BinanceAdapter(BINANCE_PROFILE, transport)
        adapter.load_markets()
        return adapter, transport

    def test_limits_from_filters(self, binance: tuple[BinanceAdapter, FakeTransport]) -> None:
        adapter, _ = binance

        limits = adapter.get_limits(ETH_BTC)

        assert adapter.pairs == [CurrencyPair.of("DOGE", "USDT"), ETH_BTC]
        assert limits.price_decimals == 6
        assert limits.amount_decimals == 3
        assert limits.min_total == Decimal("0.0001")

    def test_single_order_needs_pair(self, binance: tuple[BinanceAdapter, FakeTransport]) -> None:
        """Test that order lookups require the pair on this exchange."""
        adapter, transport = binance

        with pytest.raises(ValueError):
            adapter.get_order("7")
        order = adapter.get_order("7", ETH_BTC)
        adapter.cancel_order("7", ETH_BTC)

        assert order.status is OrderStatus.FILLED
        assert order.rate == Decimal("0.049")
        assert order.created_at == 1500000000
        assert transport.calls[-1]["params"] == {"symbol": "ETHBTC", "orderId": 7}

    def test_balances(self, binance: tuple[BinanceAdapter, FakeTransport]) -> None:
        adapter, _ = binance

        balance = adapter.get_account_info().value.balance("BTC")

        assert balance.available == Decimal("1")
        assert balance.hold == Decimal("0.5")


class TestBitfinexFlow:
    """Test the Bitfinex adapter with fixed width symbols."""

    @pytest.fixture
    def bitfinex(self) -> tuple[BitfinexAdapter, FakeTransport]:
        transport = FakeTransport(
            {
                ("GET", "symbols_details"): [
                    {"pair": "btcusd", "price_precision": 5, "minimum_order_size": "0.002"}
                ],
                ("POST", "balances"): [
                    {"type": "exchange", "currency": "btc", "amount": "1.0", "available": "0.8"},
                    {"type": "trading", "currency": "btc", "amount": "0.5", "available": "0.5"},
                ],
                ("POST", "order/new"): {"id": 448364249, "order_id": 448364249},
                ("POST", "order/status"): {
                    "id": 448411153,
                    "symbol": "btcusd",
                    "side": "sell",
                    "type": "exchange limit",
                    "price": "101.0",
                    "avg_execution_price": "0.0",
                    "timestamp": "1500000000.0",
                    "is_live": False,
                    "is_cancelled": True,
                    "original_amount": "0.5",
                    "remaining_amount": "0.5",
                    "executed_amount": "0.0",
                },
            }
        )
        adapter = BitfinexAdapter(BITFINEX_PROFILE, transport)
        adapter.load_markets()
        return adapter, transport

    def test_wallets_are_merged(self, bitfinex: tuple[BitfinexAdapter, FakeTransport]) -> None:
        adapter, _ = bitfinex

        btc = adapter.get_account_info().value.balance("BTC")

        assert btc.available == Decimal("1.3")
        assert btc.hold == Decimal("0.2")

    def test_margin_order(self, bitfinex: tuple[BitfinexAdapter, FakeTransport]) -> None:
        """Test that margin limit orders use the exchange's own token."""
        adapter, transport = bitfinex

        placed = adapter.new_order(
            BTC_USD, Decimal("0.5"), Decimal("100"), OrderSide.BUY, OrderType.MARGIN_LIMIT
        )

        assert placed.id == "448364249"
        assert transport.calls[-1]["params"]["symbol"] == "btcusd"
        assert transport.calls[-1]["params"]["type"] == "limit"

    def test_cancelled_order_is_aborted(self, bitfinex: tuple[BitfinexAdapter, FakeTransport]) -> None:
        """Test that a cancelled order with nothing executed reads as aborted."""
        adapter, _ = bitfinex

        order = adapter.get_order("448411153")

        assert order.status is OrderStatus.ABORTED
        assert order.remaining_amount == Decimal("0.5")
        assert order.rate == Decimal("101.0")


class TestFactory:
    """Test adapter construction from configuration."""

    def test_unsupported_exchange(self) -> None:
        with pytest.raises(ValueError, match="Unsupported exchange"):
            create_adapter("mtgox", config=AggregatorConfig())

    def test_without_credentials(self) -> None:
        """Test that protected reads fail loudly without credentials."""
        adapter = create_adapter(
            "KRAKEN",
            config=AggregatorConfig(),
            credentials=ExchangeCredentials(api_key="", api_secret=""),
        )

        assert isinstance(adapter, KrakenAdapter)
        assert not adapter.transport.has_credentials
        with pytest.raises(CredentialsMissing):
            adapter.get_orders()

    def test_adapters_are_independent(self) -> None:
        credentials = ExchangeCredentials(api_key="key", api_secret="c2VjcmV0")
        a = create_adapter("kraken", config=AggregatorConfig(), credentials=credentials)
        b = create_adapter("kraken", config=AggregatorConfig(), credentials=credentials)

        assert a.transport.has_credentials
        assert a.dispatcher is not b.dispatcher
        assert a.store is not b.store

    def test_ban_window_comes_from_profile(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that each exchange keeps its own ban window unless overridden."""
        # Given: an exchange whose profile asks for a five minute back-off
        monkeypatch.delenv("AGGREGATOR_DISPATCH_BAN_WINDOW_SECONDS", raising=False)
        slow = BITFINEX_PROFILE.model_copy(update={"ban_window_seconds": 300.0})
        monkeypatch.setitem(PROFILES, Exchange.BITFINEX, slow)

        # When
        adapter = create_adapter("bitfinex", config=AggregatorConfig())

        # Then
        assert adapter.dispatcher.ban_window_ms == 300_000

    def test_ban_window_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an explicit dispatcher setting replaces the profile window."""
        slow = BITFINEX_PROFILE.model_copy(update={"ban_window_seconds": 300.0})
        monkeypatch.setitem(PROFILES, Exchange.BITFINEX, slow)
        config = AggregatorConfig(dispatch=DispatcherConfig(ban_window_seconds=15))

        adapter = create_adapter("bitfinex", config=config)

        assert adapter.dispatcher.ban_window_ms == 15_000
