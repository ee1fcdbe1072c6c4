"""
Application settings and configuration management.

Supports loading from:
1. YAML config files (traffic-analytics.yaml)
2. Environment variables (fallback)
"""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml

from .constants import (
    RAPID_REQUESTS_PER_MINUTE,
    SHORT_SESSION_DURATION_MS,
    TOP_BROWSERS_LIMIT,
    TOP_LOCATIONS_LIMIT,
    TOP_PAGES_LIMIT,
    TOP_REFERRERS_LIMIT,
)

logger = logging.getLogger(__name__)

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(Exception):
    """Raised when a config file exists but cannot be used."""

    pass


@dataclass
class Settings:
    """Settings for bot filtering and analytics reconstruction."""

    # Bot filtering
    filter_bots: bool = True
    extra_user_agent_patterns: list[str] = field(default_factory=list)
    extra_ip_prefixes: list[str] = field(default_factory=list)
    rapid_requests_per_minute: int = RAPID_REQUESTS_PER_MINUTE
    short_session_duration_ms: int = SHORT_SESSION_DURATION_MS

    # Report limits
    top_pages_limit: int = TOP_PAGES_LIMIT
    top_referrers_limit: int = TOP_REFERRERS_LIMIT
    top_browsers_limit: int = TOP_BROWSERS_LIMIT
    top_locations_limit: int = TOP_LOCATIONS_LIMIT

    log_level: str = "INFO"

    def validate(self) -> list[str]:
        """Validate settings values. Returns list of errors."""
        errors = []

        if self.rapid_requests_per_minute < 1:
            errors.append(
                f"rapid_requests_per_minute must be >= 1, "
                f"got {self.rapid_requests_per_minute}"
            )
        if self.short_session_duration_ms < 0:
            errors.append(
                f"short_session_duration_ms must be >= 0, "
                f"got {self.short_session_duration_ms}"
            )
        for name in (
            "top_pages_limit",
            "top_referrers_limit",
            "top_browsers_limit",
            "top_locations_limit",
        ):
            value = getattr(self, name)
            if value < 1:
                errors.append(f"{name} must be >= 1, got {value}")
        if self.log_level.upper() not in _VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of {sorted(_VALID_LOG_LEVELS)}")

        return errors

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "bot_filter": {
                "enabled": self.filter_bots,
                "extra_user_agent_patterns": list(self.extra_user_agent_patterns),
                "extra_ip_prefixes": list(self.extra_ip_prefixes),
                "rapid_requests_per_minute": self.rapid_requests_per_minute,
                "short_session_duration_ms": self.short_session_duration_ms,
            },
            "report": {
                "top_pages_limit": self.top_pages_limit,
                "top_referrers_limit": self.top_referrers_limit,
                "top_browsers_limit": self.top_browsers_limit,
                "top_locations_limit": self.top_locations_limit,
            },
            "log_level": self.log_level,
        }

    def build_catalog(self):
        """Build a PatternCatalog extending the built-in signatures."""
        from ..classification.catalog import PatternCatalog

        return PatternCatalog.default().extended(
            user_agent_patterns=self.extra_user_agent_patterns,
            ip_prefixes=self.extra_ip_prefixes,
            rapid_requests_per_minute=self.rapid_requests_per_minute,
            short_session_duration_ms=self.short_session_duration_ms,
        )

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "Settings":
        """Create Settings from configuration dictionary (e.g., from YAML)."""
        bf = config.get("bot_filter") or {}
        report = config.get("report") or {}

        return cls(
            filter_bots=bf.get("enabled", True),
            extra_user_agent_patterns=list(bf.get("extra_user_agent_patterns") or []),
            extra_ip_prefixes=list(bf.get("extra_ip_prefixes") or []),
            rapid_requests_per_minute=bf.get(
                "rapid_requests_per_minute", RAPID_REQUESTS_PER_MINUTE
            ),
            short_session_duration_ms=bf.get(
                "short_session_duration_ms", SHORT_SESSION_DURATION_MS
            ),
            top_pages_limit=report.get("top_pages_limit", TOP_PAGES_LIMIT),
            top_referrers_limit=report.get("top_referrers_limit", TOP_REFERRERS_LIMIT),
            top_browsers_limit=report.get("top_browsers_limit", TOP_BROWSERS_LIMIT),
            top_locations_limit=report.get("top_locations_limit", TOP_LOCATIONS_LIMIT),
            log_level=config.get("log_level", "INFO"),
        )

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""

        def safe_int(key: str, default: int) -> int:
            """Safely parse int from env var, using default on error."""
            try:
                return int(os.environ.get(key, str(default)))
            except ValueError:
                return default

        def safe_bool(key: str, default: bool) -> bool:
            """Safely parse bool from env var."""
            return os.environ.get(key, str(default).lower()).lower() == "true"

        def safe_list(key: str) -> list[str]:
            """Parse a comma-separated env var into a list."""
            raw = os.environ.get(key, "")
            return [item.strip() for item in raw.split(",") if item.strip()]

        return cls(
            filter_bots=safe_bool("TRAFFIC_ANALYTICS_FILTER_BOTS", True),
            extra_user_agent_patterns=safe_list("TRAFFIC_ANALYTICS_EXTRA_UA_PATTERNS"),
            extra_ip_prefixes=safe_list("TRAFFIC_ANALYTICS_EXTRA_IP_PREFIXES"),
            rapid_requests_per_minute=safe_int(
                "TRAFFIC_ANALYTICS_RAPID_REQUESTS_PER_MINUTE", RAPID_REQUESTS_PER_MINUTE
            ),
            short_session_duration_ms=safe_int(
                "TRAFFIC_ANALYTICS_SHORT_SESSION_MS", SHORT_SESSION_DURATION_MS
            ),
            top_pages_limit=safe_int("TRAFFIC_ANALYTICS_TOP_PAGES", TOP_PAGES_LIMIT),
            top_referrers_limit=safe_int(
                "TRAFFIC_ANALYTICS_TOP_REFERRERS", TOP_REFERRERS_LIMIT
            ),
            top_browsers_limit=safe_int(
                "TRAFFIC_ANALYTICS_TOP_BROWSERS", TOP_BROWSERS_LIMIT
            ),
            top_locations_limit=safe_int(
                "TRAFFIC_ANALYTICS_TOP_LOCATIONS", TOP_LOCATIONS_LIMIT
            ),
            log_level=os.environ.get("TRAFFIC_ANALYTICS_LOG_LEVEL", "INFO"),
        )


def load_settings_file(file_path: Path) -> Settings:
    """
    Load settings from a YAML file.

    Args:
        file_path: Path to the YAML config file

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If file doesn't exist
        ConfigError: If the file is not valid YAML or not a mapping
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {file_path}: {e}") from e

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigError(
            f"Expected a mapping at top level of {file_path}, "
            f"got {type(config).__name__}"
        )

    return Settings.from_dict(config)


# Default config file path
DEFAULT_CONFIG_PATH = Path("traffic-analytics.yaml")


@lru_cache
def get_settings(config_path: Optional[str] = None) -> Settings:
    """
    Get cached settings instance.

    Loads from the YAML config file if available, otherwise from env vars.

    Args:
        config_path: Optional path to YAML config file

    Returns:
        Settings instance
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if path.exists():
        try:
            return load_settings_file(path)
        except ConfigError as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            logger.warning("Falling back to environment variables")

    return Settings.from_env()


def clear_settings_cache() -> None:
    """Clear the cached settings (useful for testing)."""
    get_settings.cache_clear()
