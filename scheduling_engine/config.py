"""
Centralized configuration with environment variable overrides.

Pricing factors, validation thresholds, and history advisory limits are
configurable here. Per-vertical booking policy lives in BookingRules and
is injected into each engine, not read from the environment.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class PricingConfig:
    """Urgency multipliers and the minimum-charge ratio."""

    standard_multiplier: float = _safe_float("PRICE_MULTIPLIER_STANDARD", "1.0")
    urgent_multiplier: float = _safe_float("PRICE_MULTIPLIER_URGENT", "1.5")
    emergency_multiplier: float = _safe_float("PRICE_MULTIPLIER_EMERGENCY", "2.0")
    price_floor_ratio: float = _safe_float("PRICE_FLOOR_RATIO", "0.5")


@dataclass(frozen=True)
class ValidationConfig:
    """Thresholds used by the booking validation checks."""

    min_phone_digits: int = _safe_int("MIN_PHONE_DIGITS", "10")
    emergency_window_hours: float = _safe_float("EMERGENCY_WINDOW_HOURS", "4")
    long_session_hours: float = _safe_float("LONG_SESSION_HOURS", "8")


@dataclass(frozen=True)
class HistoryConfig:
    """Advisory thresholds for client history analysis."""

    high_frequency_per_month: float = _safe_float("HISTORY_HIGH_FREQUENCY", "4")
    long_session_hours: float = _safe_float("HISTORY_LONG_SESSION_HOURS", "3")
    urgent_share: float = _safe_float("HISTORY_URGENT_SHARE", "0.3")
    volume_spend: float = _safe_float("HISTORY_VOLUME_SPEND", "50000")
    days_per_month: int = _safe_int("HISTORY_DAYS_PER_MONTH", "30")


@dataclass(frozen=True)
class CacheConfig:
    """Defaults for caller-owned caches and the commit rate limiter."""

    ttl_seconds: float = _safe_float("CACHE_TTL_SECONDS", "300")
    max_entries: int = _safe_int("CACHE_MAX_ENTRIES", "1024")
    commit_attempts_per_window: int = _safe_int("COMMIT_ATTEMPTS_PER_WINDOW", "5")
    commit_window_seconds: float = _safe_float("COMMIT_WINDOW_SECONDS", "60")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    pricing: PricingConfig = field(default_factory=PricingConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    default_vertical: str = os.getenv("DEFAULT_VERTICAL", "professional-services")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    for name, value in [
        ("PRICE_MULTIPLIER_STANDARD", config.pricing.standard_multiplier),
        ("PRICE_MULTIPLIER_URGENT", config.pricing.urgent_multiplier),
        ("PRICE_MULTIPLIER_EMERGENCY", config.pricing.emergency_multiplier),
    ]:
        if value <= 0:
            raise ValueError(f"{name} must be > 0, got {value}")

    if not 0.0 <= config.pricing.price_floor_ratio <= 1.0:
        raise ValueError(
            f"PRICE_FLOOR_RATIO must be between 0.0 and 1.0, got {config.pricing.price_floor_ratio}"
        )
    if config.validation.min_phone_digits < 1:
        raise ValueError(
            f"MIN_PHONE_DIGITS must be >= 1, got {config.validation.min_phone_digits}"
        )
    if config.validation.emergency_window_hours <= 0:
        raise ValueError(
            "EMERGENCY_WINDOW_HOURS must be > 0, "
            f"got {config.validation.emergency_window_hours}"
        )
    if config.validation.long_session_hours <= 0:
        raise ValueError(
            f"LONG_SESSION_HOURS must be > 0, got {config.validation.long_session_hours}"
        )
    if not 0.0 <= config.history.urgent_share <= 1.0:
        raise ValueError(
            f"HISTORY_URGENT_SHARE must be between 0.0 and 1.0, got {config.history.urgent_share}"
        )
    if config.history.days_per_month < 1:
        raise ValueError(
            f"HISTORY_DAYS_PER_MONTH must be >= 1, got {config.history.days_per_month}"
        )
    if config.cache.ttl_seconds <= 0:
        raise ValueError(f"CACHE_TTL_SECONDS must be > 0, got {config.cache.ttl_seconds}")
    if config.cache.max_entries < 1:
        raise ValueError(f"CACHE_MAX_ENTRIES must be >= 1, got {config.cache.max_entries}")
    if config.cache.commit_attempts_per_window < 1:
        raise ValueError(
            "COMMIT_ATTEMPTS_PER_WINDOW must be >= 1, "
            f"got {config.cache.commit_attempts_per_window}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded (default vertical '%s')", config.default_vertical)
    return config


# Singleton instance
settings = load_config()
