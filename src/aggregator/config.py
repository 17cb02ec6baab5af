"""
Aggregator configuration using Pydantic Settings.

This module provides configuration management for the aggregator,
allowing environment-based configuration with type validation and defaults.
"""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.aggregator.enums import Exchange, MarketType


class DispatcherConfig(BaseSettings):
    """Rate-limited dispatcher configuration."""

    model_config = SettingsConfigDict(env_prefix="AGGREGATOR_DISPATCH_")

    ban_window_seconds: float | None = Field(
        default=None,
        ge=0.0,
        description="Override for the exchange ban window; the profile value if unset",
    )
    default_quota_per_minute: int = Field(
        default=10,
        ge=1,
        description="Quota for protected endpoints without an exchange-specific value",
    )


class TransportConfig(BaseSettings):
    """REST transport configuration."""

    model_config = SettingsConfigDict(env_prefix="AGGREGATOR_TRANSPORT_")

    timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        le=120.0,
        description="Per-request timeout in seconds",
    )
    user_agent: str = "exchange-aggregator/0.1"


class PollingConfig(BaseSettings):
    """Background order book polling configuration."""

    model_config = SettingsConfigDict(env_prefix="AGGREGATOR_POLLING_")

    interval_seconds: float = Field(
        default=5.0,
        ge=0.1,
        le=600.0,
        description="Delay between order book refreshes",
    )
    market_type: MarketType = MarketType.SPOT


class ExchangeCredentials(BaseSettings):
    """
    API credentials for one exchange.

    The environment prefix depends on the exchange, e.g. AGGREGATOR_KRAKEN_API_KEY.
    """

    model_config = SettingsConfigDict(env_prefix="AGGREGATOR_EXCHANGE_")

    api_key: str = Field(default="", description="Exchange API key")
    api_secret: str = Field(default="", description="Exchange API secret")
    enabled: bool = True

    @property
    def is_configured(self) -> bool:
        """Whether authenticated calls can be signed."""
        return bool(self.api_key and self.api_secret)

    @classmethod
    def for_exchange(cls, exchange: Exchange) -> "ExchangeCredentials":
        """Load credentials from AGGREGATOR_<EXCHANGE>_* environment variables."""
        return cls(_env_prefix=f"AGGREGATOR_{exchange.value.upper()}_")


class AggregatorConfig(BaseSettings):
    """Root configuration combining all sub-configs."""

    model_config = SettingsConfigDict(env_prefix="AGGREGATOR_")

    # Sub-configurations
    dispatch: DispatcherConfig = Field(default_factory=DispatcherConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)

    # Global settings
    debug: bool = False
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )

    @classmethod
    def from_env(cls) -> "AggregatorConfig":
        """
        Load configuration from environment variables.

        Returns:
            Configured AggregatorConfig instance

        """
        return cls(
            dispatch=DispatcherConfig(),
            transport=TransportConfig(),
            polling=PollingConfig(),
        )

    def credentials(self, exchange: Exchange) -> ExchangeCredentials:
        """Credentials for an exchange, read from the environment."""
        return ExchangeCredentials.for_exchange(exchange)

    def configure_logging(self) -> None:
        """Apply the configured level to the root logger."""
        level = logging.DEBUG if self.debug else getattr(logging, self.log_level)
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        logging.getLogger().setLevel(level)
