"""Test the REST transport and request signers."""

import base64
import hashlib
import hmac
import json
from typing import Any
from unittest.mock import Mock

import pytest
import requests

from src.aggregator.adapters.binance.data import BinanceBalance, BinanceOrder
from src.aggregator.config import TransportConfig
from src.aggregator.connection import (
    BinanceSigner,
    BitfinexSigner,
    BittrexSigner,
    KrakenSigner,
    RestTransport,
    Signer,
)
from src.aggregator.dispatch.nonce import NonceGenerator
from src.aggregator.errors import (
    CredentialsMissing,
    ProviderError,
    ProviderThrottled,
    TransportError,
)
from src.aggregator.protocols import RawBalanceProtocol, RawOrderProtocol, TransportProtocol

SECRET_B64 = base64.b64encode(b"kraken-secret").decode()


def _response(status: int = 200, payload: Any = None, text: str = "") -> Mock:
    response = Mock()
    response.status_code = status
    response.text = text
    response.reason = "reason"
    if payload is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = payload
    return response


def _transport(response: Mock, **kwargs: Any) -> tuple[RestTransport, Mock]:
    session = Mock()
    session.headers = {}
    session.request.return_value = response
    transport = RestTransport(
        "testex",
        "https://api.example.com/",
        session=session,
        config=TransportConfig(timeout_seconds=3),
        nonce=NonceGenerator(clock=lambda: 1_500_000_000_000_000_000),
        **kwargs,
    )
    return transport, session


class TestRestTransport:
    """Test request building and error translation."""

    def test_public_request(self) -> None:
        """Test that public calls send params with the configured timeout."""
        transport, session = _transport(_response(payload={"ok": True}))

        result = transport.request("get", "/v1/book", params={"limit": 5})

        assert result == {"ok": True}
        session.request.assert_called_once_with(
            "GET",
            "https://api.example.com/v1/book",
            params={"limit": 5},
            data=None,
            headers=None,
            timeout=3,
        )
        assert session.headers["User-Agent"] == TransportConfig().user_agent

    def test_auth_without_signer(self) -> None:
        """Test that signing requires credentials."""
        transport, session = _transport(_response(payload={}))

        with pytest.raises(CredentialsMissing):
            transport.request("GET", "balances", auth=True)
        session.request.assert_not_called()
        assert not transport.has_credentials

    def test_signed_request_uses_signer_output(self) -> None:
        """Test that authenticated calls send exactly what the signer produced."""
        transport, session = _transport(_response(payload=[]), signer=BittrexSigner("key", "secret"))

        transport.request("GET", "account/getbalances", auth=True)

        args, kwargs = session.request.call_args
        assert args[1].startswith("https://api.example.com/account/getbalances?apikey=key&nonce=")
        assert "apisign" in kwargs["headers"]
        assert kwargs["params"] is None

    def test_http_429_is_throttle(self) -> None:
        """Test that HTTP 429 raises ProviderThrottled."""
        transport, _ = _transport(_response(429, payload={"msg": "slow"}))

        with pytest.raises(ProviderThrottled) as exc_info:
            transport.request("GET", "x")
        assert exc_info.value.status_code == 429

    def test_invalid_json(self) -> None:
        """Test that a non-JSON success body is a transport error."""
        transport, _ = _transport(_response(200, text="<html>"))

        with pytest.raises(TransportError):
            transport.request("GET", "x")

    def test_non_json_error_status(self) -> None:
        """Test that a non-JSON error body is a provider error."""
        transport, _ = _transport(_response(503, text="maintenance"))

        with pytest.raises(ProviderError, match="maintenance"):
            transport.request("GET", "x")

    def test_network_failure(self) -> None:
        """Test that requests exceptions become TransportError."""
        transport, session = _transport(_response(payload={}))
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(TransportError) as exc_info:
            transport.request("GET", "x")
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_response_checker_applies(self) -> None:
        """Test that the exchange checker unwraps payloads."""
        transport, _ = _transport(
            _response(payload={"result": [1, 2]}),
            check_response=lambda status, payload: payload["result"],
        )

        assert transport.request("GET", "x") == [1, 2]


class TestSigners:
    """Test exchange signature schemes."""

    def test_all_satisfy_protocol(self) -> None:
        """Test that every signer implements the Signer protocol."""
        signers = [
            BitfinexSigner("k", "s"),
            BittrexSigner("k", "s"),
            KrakenSigner("k", SECRET_B64),
            BinanceSigner("k", "s"),
        ]
        assert all(isinstance(s, Signer) for s in signers)

    def test_bitfinex(self) -> None:
        """Test the payload header and HMAC-SHA384 signature."""
        signed = BitfinexSigner("key", "secret").sign(
            "POST", "https://api.bitfinex.com/v1/balances", {}, 42
        )

        payload = json.loads(base64.b64decode(signed.headers["X-BFX-PAYLOAD"]))
        expected = hmac.new(
            b"secret", signed.headers["X-BFX-PAYLOAD"].encode(), hashlib.sha384
        ).hexdigest()
        assert payload == {"request": "/v1/balances", "nonce": "42"}
        assert signed.headers["X-BFX-SIGNATURE"] == expected

    def test_kraken(self) -> None:
        """Test the Kraken path plus SHA256 digest scheme."""
        signed = KrakenSigner("key", SECRET_B64).sign(
            "POST", "https://api.kraken.com/0/private/Balance", {}, 7
        )

        digest = hashlib.sha256(b"7nonce=7").digest()
        expected = hmac.new(b"kraken-secret", b"/0/private/Balance" + digest, hashlib.sha512)
        assert signed.data == "nonce=7"
        assert signed.headers["API-Sign"] == base64.b64encode(expected.digest()).decode()

    def test_binance(self) -> None:
        """Test the timestamp query and trailing signature."""
        signed = BinanceSigner("key", "secret").sign(
            "GET", "https://api.binance.com/api/v3/account", {}, 1000
        )

        query = "timestamp=1000&recvWindow=5000"
        expected = hmac.new(b"secret", query.encode(), hashlib.sha256).hexdigest()
        assert signed.url == f"https://api.binance.com/api/v3/account?{query}&signature={expected}"
        assert signed.headers == {"X-MBX-APIKEY": "key"}


class TestProtocols:
    """Test that transports and payload models satisfy the adapter protocols."""

    def test_transport_protocol(self) -> None:
        transport, _ = _transport(_response(payload={}))

        assert isinstance(transport, TransportProtocol)

    def test_payload_models(self) -> None:
        order = BinanceOrder.model_validate(
            {
                "symbol": "ETHBTC",
                "orderId": 1,
                "price": "0.05",
                "origQty": "1",
                "executedQty": "0",
                "status": "NEW",
                "type": "LIMIT",
                "side": "BUY",
                "time": 0,
            }
        )
        balance = BinanceBalance(asset="BTC", free="1", locked="0")

        assert isinstance(order, RawOrderProtocol)
        assert isinstance(balance, RawBalanceProtocol)
        assert order.average_price is None
