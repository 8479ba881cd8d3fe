"""
ClearSeller Configuration Module
================================

Environment-driven settings for the scoring engine and its CLI.
Values come from the process environment, or from a `.env` file at the
project root when one exists.

The scoring engine itself never reads this module: callers build a
ScoringConfig (here via load_scoring_config()) and inject it.

Environment Variables (scoring, all prefixed with CLEARSELLER_):
    WEIGHT_REVIEWS / WEIGHT_RATING / WEIGHT_ORDERS / WEIGHT_PROFIT
        Sub-score weights (defaults: 0.30 / 0.20 / 0.25 / 0.25)
    WINNER_THRESHOLD: Raw score for "winner" (default: 70)
    POTENTIAL_HIGH / POTENTIAL_MEDIUM: Potential bands (defaults: 75 / 50)
    MARKUP_ALIEXPRESS / MARKUP_AMAZON / MARKUP_TEMU: Platform markups
        (defaults: 2.5 / 1.8 / 3.0)
    MARKUP_DEFAULT: Unknown-source markup multiplier (default: 2.5)
    MIN_REVIEWS / MIN_RATING / MAX_PRICE: Scan pre-filter
        (defaults: 500 / 4.3 / 50.0)
    VALIDATE_CONFIG: Run ScoringConfig.validate() on load (default: false)

Environment Variables (application):
    LOG_LEVEL, LOG_FILE, LOG_JSON: Logging options
    LOG_ENGINE_LEVEL: Level of the per-product engine logger (default: LOG_LEVEL)
    ENVIRONMENT: development / production (default: development)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, TypeVar

from dotenv import load_dotenv

from .scoring.scoring_config import (
    MinimumCriteria,
    PotentialBands,
    ScoreWeights,
    ScoringConfig,
)

T = TypeVar("T")

ENV_PREFIX = "CLEARSELLER_"

_TRUTHY = ("true", "1", "yes", "on")

# .env at the project root, if any; real environment variables win
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """
    Read an environment variable.

    Args:
        key: Variable name
        default: Returned when the variable is unset
        required: Raise instead of returning a missing value

    Raises:
        ValueError: If required=True and the variable is unset
    """
    value = os.getenv(key, default)
    if required and value is None:
        raise ValueError(f"Required environment variable '{key}' is not set")
    return value


def _typed_env(key: str, default: T, cast: Callable[[str], T], type_name: str) -> T:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"Environment variable '{key}' must be {type_name}, got: {raw}")


def get_env_int(key: str, default: int) -> int:
    """Integer variable; ValueError naming the variable if unparsable."""
    return _typed_env(key, default, int, "an integer")


def get_env_float(key: str, default: float) -> float:
    """Float variable; ValueError naming the variable if unparsable."""
    return _typed_env(key, default, float, "a float")


def get_env_bool(key: str, default: bool) -> bool:
    """Boolean variable: true/1/yes/on are true, anything else false."""
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def load_scoring_config(validate: Optional[bool] = None) -> ScoringConfig:
    """
    Build a ScoringConfig from CLEARSELLER_* environment variables.

    A fresh instance is returned on every call; unset variables keep the
    built-in defaults.

    Args:
        validate: Run ScoringConfig.validate(). Defaults to CLEARSELLER_VALIDATE_CONFIG.

    Raises:
        ValueError: If a variable cannot be parsed
        ScoringConfigError: If validation is enabled and fails
    """
    defaults = ScoringConfig()

    def number(name: str, fallback: float) -> float:
        return get_env_float(ENV_PREFIX + name, fallback)

    weights = ScoreWeights(
        reviews=number("WEIGHT_REVIEWS", defaults.weights.reviews),
        rating=number("WEIGHT_RATING", defaults.weights.rating),
        orders=number("WEIGHT_ORDERS", defaults.weights.orders),
        profit=number("WEIGHT_PROFIT", defaults.weights.profit),
    )
    bands = PotentialBands(
        high=number("POTENTIAL_HIGH", defaults.potential_bands.high),
        medium=number("POTENTIAL_MEDIUM", defaults.potential_bands.medium),
    )
    markups = {
        platform: number(f"MARKUP_{platform.upper()}", multiplier)
        for platform, multiplier in defaults.platform_markup_multipliers.items()
    }
    criteria = MinimumCriteria(
        min_reviews=get_env_int(ENV_PREFIX + "MIN_REVIEWS", defaults.minimum_criteria.min_reviews),
        min_rating=number("MIN_RATING", defaults.minimum_criteria.min_rating),
        max_price=number("MAX_PRICE", defaults.minimum_criteria.max_price),
        min_orders=defaults.minimum_criteria.min_orders,
        min_profit_margin=defaults.minimum_criteria.min_profit_margin,
    )

    config = defaults.with_overrides(
        weights=weights,
        winner_threshold=number("WINNER_THRESHOLD", defaults.winner_threshold),
        potential_bands=bands,
        platform_markup_multipliers=markups,
        default_markup_multiplier=number("MARKUP_DEFAULT", defaults.default_markup_multiplier),
        minimum_criteria=criteria,
    )

    if validate is None:
        validate = get_env_bool(ENV_PREFIX + "VALIDATE_CONFIG", False)
    if validate:
        config.validate()
    return config


@dataclass
class LoggingConfig:
    """Logging options read by the CLI before dispatching a command."""

    level: str = field(default_factory=lambda: get_env("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: get_env("LOG_FILE"))
    json_logs: bool = field(default_factory=lambda: get_env_bool("LOG_JSON", False))

    # Per-product engine logs, noisy on large scans
    engine_level: Optional[str] = field(default_factory=lambda: get_env("LOG_ENGINE_LEVEL"))


@dataclass
class Settings:
    """Scoring configuration plus application-level options."""

    scoring: ScoringConfig = field(default_factory=load_scoring_config)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    app_name: str = "clearseller"
    app_version: str = "1.0.0"
    environment: str = field(default_factory=lambda: get_env("ENVIRONMENT", "development"))

    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")


def load_settings() -> Settings:
    """
    Read all settings from the environment.

    Raises:
        ValueError: If a variable is unparsable or the scoring config is invalid
    """
    return Settings()


# Lazily loaded, used by the CLI only
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Cached Settings; call reset_settings() to re-read the environment."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
