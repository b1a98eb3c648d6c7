"""Upload snapshots with tarsnap and report its statistics."""

import logging
import socket
from datetime import datetime
from typing import Optional

from .. import __util__
from ..__logger__ import stats_logger, tarsnap_logger
from ..config import Config
from .snapshot import SnapshotLayout

logger = logging.getLogger(__name__)


def archive_name(
    subvolume: str, when: Optional[datetime] = None, hostname: Optional[str] = None
) -> str:
    """Build the archive name ``<ISO8601 timestamp>-<hostname>-<subvolume>``.

    The timestamp carries the local UTC offset, so names stay unique across
    DST changes as long as a host does not back up a path twice per second.
    """
    if when is None:
        when = datetime.now().astimezone()
    if hostname is None:
        hostname = socket.gethostname()
    return f"{when.isoformat(timespec='seconds')}-{hostname}-{subvolume}"


class Archiver:
    """Run tarsnap with the settings shared by every invocation."""

    def __init__(self, config: Config, runner=None) -> None:
        self.config = config
        self._run = runner or __util__.exec_subprocess

    def _base_command(self) -> list[str]:
        return [
            "tarsnap",
            *self.config.tarsnap_opts,
            "--keyfile",
            str(self.config.tarsnap_key),
            "--cachedir",
            str(self.config.tarsnap_cache),
        ]

    def build_create_command(self, layout: SnapshotLayout, name: str) -> list[str]:
        """Command line archiving the snapshot in ``layout`` as ``name``."""
        return self._base_command() + [
            "-c",
            "--one-file-system",
            "--snaptime",
            str(layout.touched),
            "--exclude",
            str(layout.excluded),
            "-f",
            name,
            str(layout.snapshot),
        ]

    def build_stats_command(self) -> list[str]:
        """Command line printing the global archive statistics."""
        return self._base_command() + ["--print-stats", "--humanize-numbers"]

    def create(self, layout: SnapshotLayout, name: str) -> None:
        """Archive the snapshot in ``layout`` as ``name``.

        Raises:
            ArchiveError: If tarsnap exits with a non-zero status
        """
        cmd = self.build_create_command(layout, name)
        logger.info("Creating archive %s", name)
        result = self._run(cmd)
        for line in __util__.output_lines(result.stdout):
            tarsnap_logger.info("%s", line)
        if result.returncode != 0:
            raise __util__.ArchiveError(
                f"tarsnap failed to create archive {name} (exit status {result.returncode})",
                command=cmd,
                returncode=result.returncode,
                output=result.stdout,
            )

    def print_stats(self) -> bool:
        """Log the global archive statistics.

        Returns:
            False if tarsnap could not print them
        """
        result = self._run(self.build_stats_command())
        for line in __util__.output_lines(result.stdout):
            stats_logger.info("%s", line)
        if result.returncode != 0:
            stats_logger.error(
                "tarsnap --print-stats failed (exit status %d)", result.returncode
            )
            return False
        return True
