"""Command line interface for btrsnap."""

from .dispatcher import main

__all__ = ["main"]
