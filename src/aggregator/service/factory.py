"""
Adapter factory.

This module provides the exchange-agnostic entry point for building an
adapter: it picks the adapter class, signer and response checker for the
exchange and wires them to a transport configured from the environment.
"""

import requests

from src.aggregator.adapters import binance, bitfinex, bittrex, kraken
from src.aggregator.adapters.base import ExchangeAdapter
from src.aggregator.adapters.profiles import PROFILES
from src.aggregator.config import AggregatorConfig, ExchangeCredentials
from src.aggregator.connection.rest import RestTransport
from src.aggregator.connection.signing import (
    BinanceSigner,
    BitfinexSigner,
    BittrexSigner,
    KrakenSigner,
)
from src.aggregator.dispatch.dispatcher import Clock
from src.aggregator.enums import Exchange


def create_adapter(
    exchange: str | Exchange,
    config: AggregatorConfig | None = None,
    credentials: ExchangeCredentials | None = None,
    session: requests.Session | None = None,
    clock: Clock | None = None,
) -> ExchangeAdapter:
    """
    Create an adapter for the specified exchange.

    Each call builds fresh collaborators; nothing is shared between adapters.

    Args:
        exchange: Exchange name ("bitfinex", "bittrex", "kraken", "binance")
        config: Aggregator configuration, loaded from the environment if None
        credentials: API credentials, read from AGGREGATOR_<EXCHANGE>_* if None
        session: Optional requests session for the transport
        clock: Optional millisecond clock for the dispatcher

    Returns:
        Adapter ready for load_markets()

    Raises:
        ValueError: If exchange is not supported

    """
    name = exchange.value if isinstance(exchange, Exchange) else exchange.lower()
    match name:
        case "bitfinex":
            adapter_cls, signer_cls, checker = (
                bitfinex.BitfinexAdapter,
                BitfinexSigner,
                bitfinex.check_response,
            )
        case "bittrex":
            adapter_cls, signer_cls, checker = (
                bittrex.BittrexAdapter,
                BittrexSigner,
                bittrex.check_response,
            )
        case "kraken":
            adapter_cls, signer_cls, checker = (
                kraken.KrakenAdapter,
                KrakenSigner,
                kraken.check_response,
            )
        case "binance":
            adapter_cls, signer_cls, checker = (
                binance.BinanceAdapter,
                BinanceSigner,
                binance.check_response,
            )
        case _:
            raise ValueError(f"Unsupported exchange: {exchange}")

    config = config or AggregatorConfig.from_env()
    profile = PROFILES[Exchange(name)]
    credentials = credentials or config.credentials(profile.exchange)
    signer = (
        signer_cls(credentials.api_key, credentials.api_secret)
        if credentials.is_configured
        else None
    )
    transport = RestTransport(
        exchange=name,
        base_url=profile.base_url,
        check_response=checker,
        signer=signer,
        config=config.transport,
        session=session,
    )
    return adapter_cls(profile, transport, dispatcher_config=config.dispatch, clock=clock)
