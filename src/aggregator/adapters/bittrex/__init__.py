"""Bittrex exchange adapter."""

from src.aggregator.adapters.bittrex.adapter import BittrexAdapter, check_response

__all__ = ["BittrexAdapter", "check_response"]
