"""Run command: back up every subvolume given on the command line."""

import argparse
import logging

from ..__logger__ import SYSLOG_ADDRESS, create_logger
from ..config import ConfigError, load_config
from ..core.pipeline import run_backups
from .common import get_log_level

logger = logging.getLogger(__name__)


def execute_run(args: argparse.Namespace, runner=None, sleep=None) -> int:
    """Execute the backup run.

    Args:
        args: Parsed command line arguments
        runner: Command runner used for btrfs, tarsnap and mail
        sleep: Replacement for time.sleep

    Returns:
        Exit code (0 if every path succeeded, 1 otherwise)
    """
    syslog_address = None if getattr(args, "no_syslog", False) else SYSLOG_ADDRESS
    create_logger(get_log_level(args), syslog_address=syslog_address)

    try:
        config, warnings = load_config()
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1

    for warning in warnings:
        logger.warning("Config: %s", warning)

    summary = run_backups(args.paths, config, runner=runner, sleep=sleep)
    return summary.exit_code
