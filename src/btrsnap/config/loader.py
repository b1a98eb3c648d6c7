"""Environment configuration loading and validation.

btrsnap has no configuration file: every setting comes from an
environment variable and falls back to a default.
"""

import os
import shlex
from pathlib import Path
from typing import Mapping, Optional

from .schema import (
    DEFAULT_ALERT_RECIPIENTS,
    DEFAULT_TARSNAP_CACHE,
    DEFAULT_TARSNAP_KEY,
    Config,
)


class ConfigError(Exception):
    """Configuration loading or validation error."""

    pass


# Recognized environment variables, their defaults and meaning
ENV_DEFAULTS = {
    "TARSNAP_OPTS": ("", "extra flags passed verbatim to tarsnap"),
    "TARSNAP_CACHE": (DEFAULT_TARSNAP_CACHE, "tarsnap cache directory (mode 700)"),
    "TARSNAP_KEY": (DEFAULT_TARSNAP_KEY, "tarsnap key file"),
    "ALERT_RECIPIENTS": (
        DEFAULT_ALERT_RECIPIENTS,
        "recipients of failure alerts, empty disables mail",
    ),
}


def _get(environ: Mapping[str, str], name: str) -> str:
    return environ.get(name, ENV_DEFAULTS[name][0])


def describe_environment(
    environ: Optional[Mapping[str, str]] = None,
) -> list[tuple[str, str, str]]:
    """Return (name, current value, description) for each recognized variable."""
    if environ is None:
        environ = os.environ
    return [
        (name, _get(environ, name), description)
        for name, (_, description) in ENV_DEFAULTS.items()
    ]


def _validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of warnings."""
    warnings = []

    if not config.tarsnap_key.is_file():
        warnings.append(f"tarsnap key file '{config.tarsnap_key}' does not exist")

    if not config.tarsnap_cache.is_absolute():
        warnings.append(
            f"tarsnap cache '{config.tarsnap_cache}' is relative to the working directory"
        )

    if not config.alerts_enabled:
        warnings.append("ALERT_RECIPIENTS is empty, failure alerts are disabled")

    return warnings


def load_config(
    environ: Optional[Mapping[str, str]] = None,
) -> tuple[Config, list[str]]:
    """Load and validate configuration from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Tuple of (Config object, list of warnings)

    Raises:
        ConfigError: If a variable cannot be parsed
    """
    if environ is None:
        environ = os.environ

    try:
        tarsnap_opts = shlex.split(_get(environ, "TARSNAP_OPTS"))
    except ValueError as e:
        raise ConfigError(f"Cannot parse TARSNAP_OPTS: {e}")

    cache = _get(environ, "TARSNAP_CACHE")
    key = _get(environ, "TARSNAP_KEY")
    if not cache:
        raise ConfigError("TARSNAP_CACHE must not be empty")
    if not key:
        raise ConfigError("TARSNAP_KEY must not be empty")

    config = Config(
        tarsnap_opts=tarsnap_opts,
        tarsnap_cache=Path(cache),
        tarsnap_key=Path(key),
        alert_recipients=_get(environ, "ALERT_RECIPIENTS").split(),
    )

    return config, _validate_config(config)
