"""Core backup stages for btrsnap.

Validation, snapshotting and archiving of a subvolume, chained by the
per-path pipeline.
"""

from .archive import Archiver, archive_name
from .pipeline import PathState, RunSummary, VolumeResult, backup_volume, run_backups
from .snapshot import TOUCH_DELAY, SnapshotLayout, Snapshotter
from .validator import is_safe_path, validate_path

__all__ = [
    "Archiver",
    "archive_name",
    "PathState",
    "RunSummary",
    "VolumeResult",
    "backup_volume",
    "run_backups",
    "TOUCH_DELAY",
    "SnapshotLayout",
    "Snapshotter",
    "is_safe_path",
    "validate_path",
]
