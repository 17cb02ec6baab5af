"""
Request signing for authenticated exchange endpoints.

Every supported exchange authenticates with an HMAC over some canonical
form of the request, but each one chooses a different form, digest and
header set. A signer turns an unsigned request into the exact URL, body
and headers to send.
"""

import base64
import hashlib
import hmac
import json
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlencode, urlparse

from pydantic import BaseModel, ConfigDict, Field


class SignedRequest(BaseModel):
    """A request ready to be sent as is."""

    url: str
    data: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


@runtime_checkable
class Signer(Protocol):
    """Protocol for exchange-specific request signers."""

    # Divisor applied to the nanosecond nonce, e.g. 1_000_000 for milliseconds
    nonce_divisor: int

    def sign(self, method: str, url: str, params: dict[str, Any], nonce: int) -> SignedRequest:
        """Produce the signed form of a request."""
        ...


class BitfinexSigner:
    """
    Bitfinex v1: JSON payload with request path and nonce, base64 encoded,
    signed with HMAC-SHA384 and sent in X-BFX-* headers.
    """

    nonce_divisor = 1

    def __init__(self, api_key: str, api_secret: str) -> None:
        self.api_key = api_key
        self.api_secret = api_secret

    def sign(self, method: str, url: str, params: dict[str, Any], nonce: int) -> SignedRequest:
        payload = {"request": urlparse(url).path, "nonce": str(nonce), **params}
        encoded = base64.b64encode(json.dumps(payload).encode()).decode()
        signature = hmac.new(self.api_secret.encode(), encoded.encode(), hashlib.sha384)
        return SignedRequest(
            url=url,
            data="",
            headers={
                "X-BFX-APIKEY": self.api_key,
                "X-BFX-PAYLOAD": encoded,
                "X-BFX-SIGNATURE": signature.hexdigest(),
            },
        )


class BittrexSigner:
    """Bittrex v1.1: apikey and nonce in the query, HMAC-SHA512 of the full URL."""

    nonce_divisor = 1

    def __init__(self, api_key: str, api_secret: str) -> None:
        self.api_key = api_key
        self.api_secret = api_secret

    def sign(self, method: str, url: str, params: dict[str, Any], nonce: int) -> SignedRequest:
        query = urlencode({**params, "apikey": self.api_key, "nonce": nonce})
        full_url = f"{url}?{query}"
        signature = hmac.new(self.api_secret.encode(), full_url.encode(), hashlib.sha512)
        return SignedRequest(url=full_url, headers={"apisign": signature.hexdigest()})


class KrakenSigner:
    """
    Kraken: form-encoded body with nonce; the signature is
    HMAC-SHA512(path + SHA256(nonce + body)) keyed with the decoded secret.
    """

    nonce_divisor = 1

    def __init__(self, api_key: str, api_secret: str) -> None:
        self.api_key = api_key
        self.api_secret = api_secret

    def sign(self, method: str, url: str, params: dict[str, Any], nonce: int) -> SignedRequest:
        body = urlencode({"nonce": nonce, **params})
        digest = hashlib.sha256(f"{nonce}{body}".encode()).digest()
        message = urlparse(url).path.encode() + digest
        signature = hmac.new(base64.b64decode(self.api_secret), message, hashlib.sha512)
        return SignedRequest(
            url=url,
            data=body,
            headers={
                "API-Key": self.api_key,
                "API-Sign": base64.b64encode(signature.digest()).decode(),
                "Content-Type": "application/x-www-form-urlencoded",
            },
        )


class BinanceSigner:
    """Binance: millisecond timestamp in the query, HMAC-SHA256 of the query string."""

    nonce_divisor = 1_000_000

    def __init__(self, api_key: str, api_secret: str, recv_window: int = 5000) -> None:
        self.api_key = api_key
        self.api_secret = api_secret
        self.recv_window = recv_window

    def sign(self, method: str, url: str, params: dict[str, Any], nonce: int) -> SignedRequest:
        query = urlencode({**params, "timestamp": nonce, "recvWindow": self.recv_window})
        signature = hmac.new(self.api_secret.encode(), query.encode(), hashlib.sha256)
        return SignedRequest(
            url=f"{url}?{query}&signature={signature.hexdigest()}",
            headers={"X-MBX-APIKEY": self.api_key},
        )
