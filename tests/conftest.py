"""Pytest configuration and shared fixtures."""

import logging
import subprocess
from pathlib import Path

import pytest

from btrsnap.config import Config


class FakeRunner:
    """Record external commands instead of running them.

    Commands are classified by kind (snapshot, delete, archive, stats, mail)
    and can be made to fail per kind and path.
    """

    def __init__(self):
        self.calls = []
        self.rules = []

    @staticmethod
    def kind(command):
        if command[0] == "btrfs":
            return "snapshot" if "snapshot" in command else "delete"
        if command[0] == "tarsnap":
            return "stats" if "--print-stats" in command else "archive"
        return command[0]

    def fail(self, kind, when=None, returncode=1, output="", exc=None):
        """Make commands of ``kind`` fail, optionally only if ``when`` is in them."""
        self.rules.append((kind, when, returncode, output, exc))

    def kinds(self):
        return [self.kind(cmd) for cmd, _ in self.calls]

    def commands(self, kind):
        return [cmd for cmd, _ in self.calls if self.kind(cmd) == kind]

    def inputs(self, kind):
        return [stdin for cmd, stdin in self.calls if self.kind(cmd) == kind]

    def __call__(self, command, input=None):
        command = [str(c) for c in command]
        self.calls.append((command, input))
        kind = self.kind(command)
        for rule_kind, when, returncode, output, exc in self.rules:
            if rule_kind != kind:
                continue
            if when is not None and not any(when in part for part in command):
                continue
            if exc is not None:
                raise exc
            return subprocess.CompletedProcess(command, returncode, stdout=output)
        return subprocess.CompletedProcess(command, 0, stdout="")


class Sleeper:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture(autouse=True)
def reset_btrsnap_logger():
    """Undo handler changes made by create_logger."""
    yield
    logger = logging.getLogger("btrsnap")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def sleeper():
    return Sleeper()


@pytest.fixture
def config(tmp_path):
    """Configuration pointing the tarsnap cache and key into tmp_path."""
    key = tmp_path / "tarsnap_key"
    key.write_text("key")
    return Config(
        tarsnap_opts=[],
        tarsnap_cache=tmp_path / "cache",
        tarsnap_key=key,
        alert_recipients=["root"],
        hostname="backuphost",
    )


@pytest.fixture
def make_subvolume(tmp_path):
    """Create plain directories standing in for btrfs subvolumes."""

    def _make(name="data") -> Path:
        path = tmp_path / "vol" / name
        path.mkdir(parents=True)
        return path

    return _make


@pytest.fixture
def env(monkeypatch, tmp_path):
    """Point the environment variables read by btrsnap into tmp_path."""
    key = tmp_path / "tarsnap_key"
    key.write_text("key")
    monkeypatch.setenv("TARSNAP_CACHE", str(tmp_path / "cache"))
    monkeypatch.setenv("TARSNAP_KEY", str(key))
    monkeypatch.setenv("TARSNAP_OPTS", "")
    monkeypatch.setenv("ALERT_RECIPIENTS", "root")
    return monkeypatch
