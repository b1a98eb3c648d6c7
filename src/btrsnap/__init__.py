"""btrsnap: btrsnap/__init__.py."""

from pathlib import Path


__version__ = "0.3.0"

# Name of the bookkeeping directory created inside every subvolume
BOOKKEEPING_DIR = ".btrsnap"


def bookkeeping_dir(subvolume: Path | str) -> Path:
    """Return the management directory of ``subvolume``."""
    return Path(subvolume) / BOOKKEEPING_DIR
