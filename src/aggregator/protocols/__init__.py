"""Exchange payload and transport protocols."""

from src.aggregator.protocols.exchange import (
    RawBalanceProtocol,
    RawOrderProtocol,
    TransportProtocol,
)

__all__ = [
    "RawBalanceProtocol",
    "RawOrderProtocol",
    "TransportProtocol",
]
