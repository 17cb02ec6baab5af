"""Bitfinex exchange adapter."""

from src.aggregator.adapters.bitfinex.adapter import BitfinexAdapter, check_response

__all__ = ["BitfinexAdapter", "check_response"]
