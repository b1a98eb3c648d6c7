"""Per-subvolume backup pipeline and run aggregation.

Each path moves through the states

    PENDING -> VALIDATING -> SNAPSHOTTING -> ARCHIVING -> CLEANING -> SUCCEEDED

and ends in FAILED as soon as a stage fails. Once the archive stage has
been reached the snapshot is always deleted, whatever tarsnap reported.
"""

import logging
import time
import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .. import __util__
from ..alert import send_alert
from ..config import Config
from .archive import Archiver, archive_name
from .snapshot import Snapshotter
from .validator import validate_path

logger = logging.getLogger(__name__)


class PathState(Enum):
    PENDING = "pending"
    VALIDATING = "validating"
    SNAPSHOTTING = "snapshotting"
    ARCHIVING = "archiving"
    CLEANING = "cleaning"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class VolumeResult:
    """Outcome of backing up a single path.

    Attributes:
        path: Subvolume path as given on the command line
        state: Current (finally: terminal) state
        history: Every state visited, in order
        archive: Name of the archive, once one was attempted
        error: Message of the error that failed the path
        failed_stage: State in which the error occurred
        output: Output of the failing external command, if any
        cleanup_error: Message of a failed snapshot deletion
    """

    path: str
    state: PathState = PathState.PENDING
    history: list[PathState] = field(default_factory=lambda: [PathState.PENDING])
    archive: Optional[str] = None
    error: Optional[str] = None
    failed_stage: Optional[PathState] = None
    output: str = ""
    cleanup_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state is PathState.SUCCEEDED

    def advance(self, state: PathState) -> None:
        self.state = state
        self.history.append(state)

    def fail(self, error: BaseException, stage: Optional[PathState] = None) -> None:
        self.failed_stage = stage or self.state
        self.error = str(error) or type(error).__name__
        if isinstance(error, __util__.CommandError):
            self.output = error.output
        self.advance(PathState.FAILED)


@dataclass
class RunSummary:
    """Aggregate of all path results of one run."""

    results: list[VolumeResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[VolumeResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[VolumeResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def _cleanup(snapshotter: Snapshotter, result: VolumeResult) -> None:
    try:
        snapshotter.delete()
    except Exception as e:
        # The outcome of the archive stage stands
        logger.error("Failed to remove snapshot of %s: %s", result.path, e)
        result.cleanup_error = str(e)


def backup_volume(path: str, config: Config, runner=None, sleep=None) -> VolumeResult:
    """Validate, snapshot, archive and clean up a single subvolume.

    Errors never propagate out of this function; they are recorded in the
    returned result instead.
    """
    result = VolumeResult(path)
    logger.info(__util__.log_heading(f"Volume: {path}"))

    try:
        result.advance(PathState.VALIDATING)
        validate_path(path)

        result.advance(PathState.SNAPSHOTTING)
        snapshotter = Snapshotter(path, config, runner=runner, sleep=sleep)
        snapshot = snapshotter.take()
        logger.info("Created snapshot: %s", snapshot)

        result.advance(PathState.ARCHIVING)
        result.archive = archive_name(path, hostname=config.hostname)
        archive_error = None
        try:
            Archiver(config, runner=runner).create(snapshotter.layout, result.archive)
        except Exception as e:
            archive_error = e

        result.advance(PathState.CLEANING)
        _cleanup(snapshotter, result)
        if archive_error is not None:
            result.fail(archive_error, stage=PathState.ARCHIVING)
            logger.error("Backup of %s failed: %s", path, result.error)
            return result

    except __util__.AbortError as e:
        result.fail(e)
        logger.error("Backup of %s failed: %s", path, result.error)
        return result
    except Exception as e:
        logger.debug(traceback.format_exc())
        result.fail(e)
        logger.error("Backup of %s failed unexpectedly: %r", path, e)
        return result

    result.advance(PathState.SUCCEEDED)
    logger.info("Backup of %s completed as %s", path, result.archive)
    return result


def run_backups(paths, config: Config, runner=None, sleep=None) -> RunSummary:
    """Back up ``paths`` one after another and print tarsnap statistics.

    A failing path triggers an alert but does not stop the remaining ones.
    """
    summary = RunSummary()
    logger.info(__util__.log_heading(f"Started at {time.ctime()}"))

    for path in paths:
        result = backup_volume(path, config, runner=runner, sleep=sleep)
        if not result.ok:
            send_alert(config, result, runner=runner)
        summary.results.append(result)

    Archiver(config, runner=runner).print_stats()

    logger.info(__util__.log_heading(f"Finished at {time.ctime()}"))
    if summary.ok:
        logger.info("All %d path(s) backed up successfully", len(summary.results))
    else:
        logger.error(
            "Completed with errors: %d succeeded, %d failed (%s)",
            len(summary.succeeded),
            len(summary.failed),
            ", ".join(r.path for r in summary.failed),
        )
    return summary
