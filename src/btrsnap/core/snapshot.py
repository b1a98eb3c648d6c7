# pyright: standard

"""btrsnap: btrsnap/core/snapshot.py
Create and remove the transient read-only snapshot of a subvolume.
"""

import time
from dataclasses import dataclass
from pathlib import Path

from .. import __util__, bookkeeping_dir
from ..__logger__ import btrfs_logger, logger
from ..config import Config

# Seconds to wait after refreshing the touch marker. tarsnap compares file
# mtimes against the marker, and some filesystems only store whole seconds.
TOUCH_DELAY = 2


@dataclass(frozen=True)
class SnapshotLayout:
    """Locations btrsnap manages beneath a subvolume."""

    subvolume: Path

    @property
    def base(self) -> Path:
        return bookkeeping_dir(self.subvolume)

    @property
    def touched(self) -> Path:
        return self.base / "touched"

    @property
    def snapshot(self) -> Path:
        return self.base / "snapshot"

    @property
    def excluded(self) -> Path:
        """Bookkeeping directory as seen inside the snapshot."""
        return bookkeeping_dir(self.snapshot)


class Snapshotter:
    """Manage the snapshot of a single subvolume."""

    def __init__(self, subvolume, config: Config, runner=None, sleep=None) -> None:
        self.layout = SnapshotLayout(Path(subvolume))
        self.config = config
        self._run = runner or __util__.exec_subprocess
        self._sleep = time.sleep if sleep is None else sleep

    def __repr__(self) -> str:
        return f"Snapshotter({self.layout.subvolume})"

    def prepare(self) -> None:
        """Create bookkeeping directories and refresh the touch marker."""
        try:
            self.layout.base.mkdir(exist_ok=True)
            cache = self.config.tarsnap_cache
            cache.mkdir(parents=True, exist_ok=True, mode=0o700)
            cache.chmod(0o700)
            self.layout.touched.touch()
        except OSError as e:
            raise __util__.AbortError(
                f"cannot prepare {self.layout.base}: {e}"
            ) from e
        self._sleep(TOUCH_DELAY)

    def remove_stale(self) -> bool:
        """Delete a snapshot left behind by an earlier run.

        Returns:
            True if a stale snapshot was found and deleted
        """
        if not self.layout.snapshot.is_dir():
            return False
        logger.warning("Removing stale snapshot %s", self.layout.snapshot)
        self.delete()
        return True

    def create(self) -> Path:
        """Create the read-only snapshot and return its path."""
        self._btrfs(
            [
                "btrfs",
                "subvolume",
                "snapshot",
                "-r",
                str(self.layout.subvolume),
                str(self.layout.snapshot),
            ],
            "create snapshot",
        )
        return self.layout.snapshot

    def delete(self) -> None:
        """Delete the snapshot subvolume."""
        self._btrfs(
            ["btrfs", "subvolume", "delete", str(self.layout.snapshot)],
            "delete snapshot",
        )

    def take(self) -> Path:
        """Prepare, clear out leftovers, and snapshot the subvolume."""
        self.prepare()
        self.remove_stale()
        return self.create()

    def _btrfs(self, cmd: list[str], action: str) -> None:
        result = self._run(cmd)
        lines = __util__.output_lines(result.stdout)
        if result.returncode != 0:
            for line in lines:
                btrfs_logger.error("%s", line)
            btrfs_logger.error(
                "Failed to %s %s (exit status %d)",
                action,
                self.layout.snapshot,
                result.returncode,
            )
            raise __util__.SnapshotError(
                f"failed to {action} {self.layout.snapshot}",
                command=cmd,
                returncode=result.returncode,
                output=result.stdout,
            )
        for line in lines:
            btrfs_logger.info("%s", line)
