# pyright: standard

"""btrsnap: btrsnap/__logger__.py
A common logger writing to a rich console and to the system logger.
"""

import logging
import logging.handlers
import os

from rich.console import Console
from rich.logging import RichHandler

SYSLOG_ADDRESS = "/dev/log"

# Tags under which messages show up in the system log
TAG_MAIN = "btrsnap"
TAG_BTRFS = "btrsnap/btrfs"
TAG_TARSNAP = "btrsnap/tarsnap"
TAG_STATS = "btrsnap/tarsnap-stats"

# Initialize basic console and handler
cons = Console(stderr=True)
rich_handler = RichHandler(console=cons, show_path=False)
logger = logging.getLogger(TAG_MAIN)


def tag_to_logger_name(tag: str) -> str:
    """Map a syslog tag like ``btrsnap/btrfs`` to its logger name."""
    return tag.replace("/", ".")


def get_tagged_logger(tag: str) -> logging.Logger:
    """Return the logger whose records carry ``tag`` in the system log."""
    return logging.getLogger(tag_to_logger_name(tag))


btrfs_logger = get_tagged_logger(TAG_BTRFS)
tarsnap_logger = get_tagged_logger(TAG_TARSNAP)
stats_logger = get_tagged_logger(TAG_STATS)


class SyslogTagFilter(logging.Filter):
    """Attach the syslog tag derived from the logger name to each record."""

    tags = {tag_to_logger_name(t): t for t in (TAG_BTRFS, TAG_TARSNAP, TAG_STATS)}

    def filter(self, record: logging.LogRecord) -> bool:
        # Module loggers like btrsnap.core.pipeline report under the main tag
        record.syslog_tag = self.tags.get(record.name, TAG_MAIN)
        return True


def create_syslog_handler(address=SYSLOG_ADDRESS) -> logging.Handler | None:
    """Create a handler for the local system logger.

    Returns None if the syslog socket cannot be reached.
    """
    if isinstance(address, str) and not os.path.exists(address):
        cons.print(f"[yellow]System log socket {address} not found, logging to console only")
        return None
    try:
        handler = logging.handlers.SysLogHandler(
            address=address, facility=logging.handlers.SysLogHandler.LOG_USER
        )
    except OSError as e:
        cons.print(f"[yellow]Cannot connect to system log at {address}: {e}")
        return None
    handler.addFilter(SyslogTagFilter())
    handler.setFormatter(logging.Formatter("%(syslog_tag)s[%(process)d]: %(message)s"))
    return handler


def create_logger(level="INFO", syslog_address=SYSLOG_ADDRESS) -> None:
    """Helper function to setup logging for a run.

    Args:
        level: Log level name for the console
        syslog_address: Address of the system logger, None to disable it
    """
    # pylint: disable=global-statement
    global cons, rich_handler

    cons = Console(stderr=True)
    rich_handler = RichHandler(console=cons, show_path=False)
    rich_handler.setLevel(level)

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    logger.addHandler(rich_handler)

    if syslog_address is not None:
        syslog_handler = create_syslog_handler(syslog_address)
        if syslog_handler is not None:
            # Debug output stays on the console
            syslog_handler.setLevel(logging.INFO)
            logger.addHandler(syslog_handler)
