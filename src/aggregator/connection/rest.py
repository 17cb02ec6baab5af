"""
REST transport.

Thin wrapper around a requests.Session that:
- Signs authenticated requests with an exchange signer and a fresh nonce
- Applies the configured timeout and user agent
- Translates network failures into TransportError
- Hands the decoded payload to the exchange's response checker, which
  raises ProviderThrottled / ProviderError or unwraps the result
"""

import logging
from collections.abc import Callable
from typing import Any

import requests

from src.aggregator.config import TransportConfig
from src.aggregator.connection.signing import SignedRequest, Signer
from src.aggregator.dispatch.nonce import NonceGenerator
from src.aggregator.errors import (
    CredentialsMissing,
    ProviderError,
    ProviderThrottled,
    TransportError,
)

logger = logging.getLogger(__name__)

# Receives (HTTP status, decoded payload); returns the result or raises
ResponseChecker = Callable[[int, Any], Any]


def passthrough(status_code: int, payload: Any) -> Any:
    """Response checker for exchanges without an error envelope."""
    if status_code >= 400:
        raise ProviderError(str(payload), status_code=status_code)
    return payload


class RestTransport:
    """
    HTTP collaborator for one exchange.

    Each adapter owns its transport; nonces are per transport since they
    are per API key.
    """

    def __init__(
        self,
        exchange: str,
        base_url: str,
        check_response: ResponseChecker = passthrough,
        signer: Signer | None = None,
        config: TransportConfig | None = None,
        session: requests.Session | None = None,
        nonce: NonceGenerator | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            exchange: Exchange name for errors and log messages
            base_url: Root URL every path is joined to
            check_response: Exchange-specific envelope handling
            signer: Request signer, None when no credentials are configured
            config: Timeout and user agent settings
            session: Optional requests session, injectable for tests
            nonce: Nonce source for authenticated requests

        """
        self.exchange = exchange
        self.base_url = base_url.rstrip("/")
        self.check_response = check_response
        self.signer = signer
        self.config = config or TransportConfig()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.config.user_agent})
        self.nonce = nonce or NonceGenerator()

    @property
    def has_credentials(self) -> bool:
        return self.signer is not None

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        auth: bool = False,
    ) -> Any:
        """
        Send a request and return the checked, decoded payload.

        Raises:
            CredentialsMissing: If auth is requested without a signer
            ProviderThrottled: If the exchange signals throttling
            ProviderError: If the exchange reports a business error
            TransportError: If the request fails or the body is not JSON

        """
        method = method.upper()
        url = self.url_for(path)
        params = dict(params or {})

        if auth:
            if self.signer is None:
                raise CredentialsMissing(self.exchange)
            divisor = self.signer.nonce_divisor
            nonce = self.nonce.scaled(divisor) if divisor > 1 else self.nonce.next()
            signed = self.signer.sign(method, url, params, nonce)
            response = self._send(method, signed)
        else:
            response = self._send(method, SignedRequest(url=url), params=params)

        if response.status_code == 429:
            raise ProviderThrottled(
                f"{self.exchange}: too many requests",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            if response.status_code >= 400:
                raise ProviderError(
                    response.text or response.reason or "HTTP error",
                    status_code=response.status_code,
                ) from e
            raise TransportError(f"{self.exchange}: invalid JSON from {path}") from e

        return self.check_response(response.status_code, payload)

    def _send(
        self,
        method: str,
        prepared: SignedRequest,
        params: dict[str, Any] | None = None,
    ) -> requests.Response:
        logger.debug(f"{self.exchange}: {method} {prepared.url}")
        try:
            return self.session.request(
                method,
                prepared.url,
                params=params or None,
                data=prepared.data or None,
                headers=prepared.headers or None,
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            raise TransportError(f"{self.exchange}: {method} {prepared.url} failed: {e}") from e

    def close(self) -> None:
        self.session.close()
