"""HTTP transport and request signing."""

from src.aggregator.connection.rest import RestTransport, passthrough
from src.aggregator.connection.signing import (
    BinanceSigner,
    BitfinexSigner,
    BittrexSigner,
    KrakenSigner,
    SignedRequest,
    Signer,
)

__all__ = [
    "BinanceSigner",
    "BitfinexSigner",
    "BittrexSigner",
    "KrakenSigner",
    "RestTransport",
    "SignedRequest",
    "Signer",
    "passthrough",
]
