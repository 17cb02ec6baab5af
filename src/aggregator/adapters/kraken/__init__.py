"""Kraken exchange adapter."""

from src.aggregator.adapters.kraken.adapter import KrakenAdapter, check_response

__all__ = ["KrakenAdapter", "check_response"]
