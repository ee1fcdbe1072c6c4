"""Configuration module."""

from .constants import (
    BOT_IP_PREFIXES,
    BOT_USER_AGENT_PATTERNS,
    SESSION_TIMEOUT_MS,
)
from .settings import (
    ConfigError,
    Settings,
    clear_settings_cache,
    get_settings,
    load_settings_file,
)

__all__ = [
    # Session configuration
    "SESSION_TIMEOUT_MS",
    # Bot classification
    "BOT_USER_AGENT_PATTERNS",
    "BOT_IP_PREFIXES",
    # Settings
    "ConfigError",
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "load_settings_file",
]
