# pyright: standard

"""btrsnap: btrsnap/__util__.py
Common exceptions and helpers shared by the backup stages.
"""

import logging
import subprocess
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

# Return codes reported for executables that cannot be run, as a shell would
COMMAND_NOT_EXECUTABLE = 126
COMMAND_NOT_FOUND = 127


class AbortError(Exception):
    """Processing of the current subvolume has to be aborted."""


class ValidationError(AbortError):
    """A subvolume path contains characters outside the allow-list."""


class CommandError(AbortError):
    """An external command exited with a non-zero status."""

    def __init__(self, message: str, command=None, returncode=None, output=""):
        super().__init__(message)
        self.command = list(command) if command else []
        self.returncode = returncode
        self.output = output or ""


class SnapshotError(CommandError):
    """btrfs failed to create or delete a snapshot."""


class ArchiveError(CommandError):
    """tarsnap failed to create an archive."""


class AlertError(Exception):
    """An alert mail could not be delivered."""


def exec_subprocess(
    command: Sequence[str], input: Optional[str] = None
) -> subprocess.CompletedProcess:
    """Run ``command`` to completion and return the finished process.

    stderr is merged into stdout and decoded as text. A non-zero exit status
    is not treated as an error here; callers inspect ``returncode`` and decide.
    A missing executable is reported with return code 127, one that cannot be
    executed with 126.
    """
    command = [str(c) for c in command]
    logger.debug("Executing: %s", command)
    try:
        return subprocess.run(
            command,
            input=input,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            check=False,
        )
    except FileNotFoundError as e:
        logger.debug("Executable not found: %s", e)
        return subprocess.CompletedProcess(
            command, COMMAND_NOT_FOUND, stdout=f"{command[0]}: command not found\n"
        )
    except OSError as e:
        logger.debug("Cannot execute %s: %s", command[0], e)
        returncode = (
            COMMAND_NOT_EXECUTABLE if isinstance(e, PermissionError) else COMMAND_NOT_FOUND
        )
        return subprocess.CompletedProcess(
            command, returncode, stdout=f"{command[0]}: {e.strerror or e}\n"
        )


def output_lines(output: Optional[str]) -> list[str]:
    """Split command output into non-empty lines."""
    if not output:
        return []
    return [line for line in output.splitlines() if line.strip()]


def log_heading(caption: str) -> str:
    """Formatted heading for logging output sections."""
    return f"{f'--[ {caption} ]':-<50}"
