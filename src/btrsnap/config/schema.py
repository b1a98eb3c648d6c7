"""Configuration schema definitions using dataclasses.

Defines the settings read from the environment with sensible defaults.
"""

import socket
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_TARSNAP_CACHE = "/var/cache/tarsnap-cache"
DEFAULT_TARSNAP_KEY = "/root/tarsnap.key"
DEFAULT_ALERT_RECIPIENTS = "root"


@dataclass
class Config:
    """Settings for a backup run.

    Attributes:
        tarsnap_opts: Extra arguments passed to tarsnap before all others
        tarsnap_cache: Cache directory shared by all tarsnap invocations
        tarsnap_key: Key file passed to tarsnap
        alert_recipients: Mail recipients for failure alerts
        hostname: Host name used in archive names and alert subjects
    """

    tarsnap_opts: list[str] = field(default_factory=list)
    tarsnap_cache: Path = Path(DEFAULT_TARSNAP_CACHE)
    tarsnap_key: Path = Path(DEFAULT_TARSNAP_KEY)
    alert_recipients: list[str] = field(
        default_factory=lambda: [DEFAULT_ALERT_RECIPIENTS]
    )
    hostname: str = field(default_factory=socket.gethostname)

    @property
    def alerts_enabled(self) -> bool:
        """Whether failure alerts are mailed at all."""
        return bool(self.alert_recipients)
