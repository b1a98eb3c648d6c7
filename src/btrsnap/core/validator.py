"""Subvolume path validation.

Paths end up in command lines, archive names and mail subjects, so only
a conservative set of characters is accepted.
"""

import re

from .. import __util__

SAFE_PATH_RE = re.compile(r"[0-9a-zA-Z_/-]+")


def is_safe_path(path: str) -> bool:
    """Return True if ``path`` consists of allow-listed characters only."""
    return SAFE_PATH_RE.fullmatch(path) is not None


def validate_path(path: str) -> str:
    """Return ``path`` unchanged if it is safe to process.

    Raises:
        ValidationError: If the path contains any other character
    """
    if not is_safe_path(path):
        raise __util__.ValidationError(
            f"unsafe path {path!r}: only [0-9a-zA-Z_/-] are allowed"
        )
    return path
