"""Pytest configuration and fixtures for minish tests."""

import io
import logging
import os
import stat
from pathlib import Path

import pytest

from minish.builtin_commands import build_registry
from minish.dispatcher import Dispatcher
from minish.models import Continuation


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep env vars and global logging state from leaking between tests."""
    for name in ("MINISH_PROMPT", "MINISH_LOG_FILE", "MINISH_DEBUG"):
        monkeypatch.delenv(name, raising=False)

    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    logging.disable(logging.NOTSET)
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(saved_level)


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def err():
    return io.StringIO()


class RecordingLauncher:
    """Launcher stand-in that records calls instead of spawning."""

    def __init__(self):
        self.calls: list[list[str]] = []
        self.last_outcome = None

    def launch(self, argv):
        self.calls.append(list(argv))
        return Continuation.CONTINUE


@pytest.fixture
def recording_launcher():
    return RecordingLauncher()


@pytest.fixture
def dispatcher(recording_launcher, out, err):
    """Dispatcher with default builtins and a recording launcher."""
    return Dispatcher(
        registry=build_registry(),
        launcher=recording_launcher,
        stdout=out,
        stderr=err,
    )


def write_executable(directory: Path, name: str, body: str) -> Path:
    """Create an executable file in ``directory``."""
    path = directory / name
    path.write_text(body, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def bin_dir(tmp_path):
    """Empty directory to use as a search path."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


posix_only = pytest.mark.skipif(os.name != "posix", reason="requires POSIX processes")
