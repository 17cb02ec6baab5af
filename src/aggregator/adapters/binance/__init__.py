"""Binance exchange adapter."""

from src.aggregator.adapters.binance.adapter import BinanceAdapter, check_response

__all__ = ["BinanceAdapter", "check_response"]
