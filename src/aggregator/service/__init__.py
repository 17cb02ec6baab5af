"""Adapter construction and background polling."""

from src.aggregator.service.factory import create_adapter
from src.aggregator.service.poller import ExchangePoller, PollingService

__all__ = ["ExchangePoller", "PollingService", "create_adapter"]
