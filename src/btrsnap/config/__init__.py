"""Configuration system for btrsnap.

Settings are read from environment variables only.
"""

from .loader import ENV_DEFAULTS, ConfigError, describe_environment, load_config
from .schema import Config

__all__ = [
    "Config",
    "ConfigError",
    "ENV_DEFAULTS",
    "describe_environment",
    "load_config",
]
