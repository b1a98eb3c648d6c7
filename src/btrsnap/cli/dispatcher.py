"""CLI entry point: argument parsing and routing.

btrsnap takes one or more subvolume paths. Everything else is read from
the environment, and the help text shows the values currently in effect.
"""

import argparse
import os
import sys
from typing import Mapping, Optional

from ..config import describe_environment
from .common import add_verbosity_args


def format_environment(environ: Optional[Mapping[str, str]] = None) -> str:
    """Describe the recognized environment variables for the help text."""
    lines = [
        "paths starting with '-' must follow '--', e.g. btrsnap -- -vol",
        "",
        "environment variables (current values):",
    ]
    for name, value, description in describe_environment(environ):
        lines.append(f"  {name}={value!r}")
        lines.append(f"      {description}")
    return "\n".join(lines)


class ArgumentParser(argparse.ArgumentParser):
    """Parser reporting usage errors with exit status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def create_parser(environ: Optional[Mapping[str, str]] = None) -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = ArgumentParser(
        prog="btrsnap",
        description=(
            "Snapshot btrfs subvolumes and archive the snapshots with tarsnap. "
            "Each PATH is snapshotted to PATH/.btrsnap/snapshot, archived and "
            "the snapshot deleted again."
        ),
        epilog=format_environment(environ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="btrfs subvolume to back up",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Show version and exit",
    )
    add_verbosity_args(parser)

    return parser


def main(argv: list[str] | None = None, runner=None, sleep=None) -> int:
    """Main entry point for the btrsnap CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])
        runner: Command runner used for btrfs, tarsnap and mail
        sleep: Replacement for time.sleep

    Returns:
        Exit code
    """
    from .. import __version__

    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser(os.environ)
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # --help and usage errors
        return e.code if isinstance(e.code, int) else 1

    if args.version:
        print(f"btrsnap {__version__}")
        return 0

    if not args.paths:
        parser.print_usage(sys.stderr)
        print("btrsnap: error: at least one PATH is required", file=sys.stderr)
        return 1

    from .run import execute_run

    return execute_run(args, runner=runner, sleep=sleep)
