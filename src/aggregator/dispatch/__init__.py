"""Rate limiting and request nonces."""

from src.aggregator.dispatch.dispatcher import (
    CachedResponse,
    DispatchResult,
    RateLimitedDispatcher,
    RateLimitState,
)
from src.aggregator.dispatch.nonce import NonceGenerator

__all__ = [
    "CachedResponse",
    "DispatchResult",
    "NonceGenerator",
    "RateLimitState",
    "RateLimitedDispatcher",
]
