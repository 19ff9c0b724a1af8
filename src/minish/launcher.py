"""Spawning external programs and waiting for them to finish.

The platform-specific part is a small backend with two operations: start a
program with the interpreter's own standard streams, and report the next
state change of that program. ``ProcessLauncher`` drives the backend and
keeps waiting until the child has exited or been killed by a signal.
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
import sys
import threading
import time
from contextlib import contextmanager
from typing import Any, Iterator, Protocol, TextIO

from .constants import ERROR_PREFIX
from .errors import CommandNotFoundError, SpawnError
from .logging_utils import log_event
from .models import Continuation, ProcessOutcome, WaitObservation, signal_name


class ProcessBackend(Protocol):
    def spawn(self, path: str, argv: list[str]) -> Any: ...

    def wait_once(self, handle: Any) -> WaitObservation: ...


def resolve_executable(name: str, search_path: str | None = None) -> str:
    """Resolve a command name to an executable path.

    Names containing a path separator are checked as given; bare names are
    looked up on ``search_path`` (``PATH`` when omitted).
    """
    path = shutil.which(name, path=search_path)
    if path is None:
        raise CommandNotFoundError(name)
    return path


def _spawn_popen(path: str, argv: list[str]) -> subprocess.Popen:
    try:
        # stdin/stdout/stderr left as None: the child shares ours.
        return subprocess.Popen(argv, executable=path, close_fds=True)
    except OSError as e:
        raise SpawnError(f"{argv[0]}: {e.strerror or e}") from e


class PosixProcessBackend:
    """waitpid-based backend that distinguishes every state change."""

    def spawn(self, path: str, argv: list[str]) -> subprocess.Popen:
        return _spawn_popen(path, argv)

    def wait_once(self, handle: subprocess.Popen) -> WaitObservation:
        try:
            _, status = os.waitpid(handle.pid, os.WUNTRACED | os.WCONTINUED)
        except ChildProcessError as e:
            return WaitObservation(
                terminal=True,
                outcome=ProcessOutcome.lost(),
                state="lost",
                error=str(e),
            )
        except OSError as e:
            return WaitObservation(terminal=False, state="error", error=str(e))

        if os.WIFEXITED(status):
            outcome = ProcessOutcome.exited(os.WEXITSTATUS(status))
        elif os.WIFSIGNALED(status):
            outcome = ProcessOutcome.signaled(os.WTERMSIG(status))
        elif os.WIFSTOPPED(status):
            return WaitObservation(
                terminal=False,
                state=f"stopped by {signal_name(os.WSTOPSIG(status))}",
            )
        elif os.WIFCONTINUED(status):
            return WaitObservation(terminal=False, state="continued")
        else:
            return WaitObservation(terminal=False, state=f"unknown status {status:#x}")

        # Keep Popen's bookkeeping in sync so it never waits on a reaped pid.
        handle.returncode = outcome.returncode
        return WaitObservation(terminal=True, outcome=outcome, state=outcome.kind.value)


class PopenProcessBackend:
    """Portable backend; ``Popen.wait`` only reports terminal states."""

    def spawn(self, path: str, argv: list[str]) -> subprocess.Popen:
        return _spawn_popen(path, argv)

    def wait_once(self, handle: subprocess.Popen) -> WaitObservation:
        try:
            code = handle.wait()
        except OSError as e:
            return WaitObservation(terminal=False, state="error", error=str(e))
        if code < 0:
            outcome = ProcessOutcome.signaled(-code)
        else:
            outcome = ProcessOutcome.exited(code)
        return WaitObservation(terminal=True, outcome=outcome, state=outcome.kind.value)


def default_backend() -> ProcessBackend:
    if os.name == "posix":
        return PosixProcessBackend()
    return PopenProcessBackend()


@contextmanager
def _interrupts_ignored() -> Iterator[None]:
    """Ignore SIGINT in the interpreter while a foreground child runs.

    The terminal still delivers Ctrl-C to the child, which shares our
    process group.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous if previous is not None else signal.SIG_DFL)


class ProcessLauncher:
    """Run one external command in the foreground."""

    def __init__(
        self,
        backend: ProcessBackend | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        search_path: str | None = None,
    ):
        self._backend = backend if backend is not None else default_backend()
        self._stdout = stdout if stdout is not None else sys.stdout
        self._stderr = stderr if stderr is not None else sys.stderr
        self._search_path = search_path
        self.last_outcome: ProcessOutcome | None = None

    def _report(self, message: str) -> None:
        print(f"{ERROR_PREFIX} {message}", file=self._stderr)
        self._stderr.flush()

    def launch(self, argv: list[str]) -> Continuation:
        """Resolve, spawn and wait for ``argv``.

        Always continues the loop, whatever the program is called or however
        it ends.
        """
        name = argv[0]
        self.last_outcome = None

        try:
            path = resolve_executable(name, self._search_path)
            # Our buffered output must land before the child's.
            self._stdout.flush()
            self._stderr.flush()
            handle = self._backend.spawn(path, argv)
        except (CommandNotFoundError, SpawnError) as e:
            self._report(str(e))
            log_event(
                "command_error",
                level=logging.WARNING,
                command=name,
                kind="external",
                error_type=type(e).__name__,
                error=str(e),
            )
            return Continuation.CONTINUE

        self.last_outcome = self._wait(name, handle)
        return Continuation.CONTINUE

    def _wait(self, name: str, handle: Any) -> ProcessOutcome | None:
        pid = getattr(handle, "pid", None)
        with _interrupts_ignored():
            while True:
                observation = self._backend.wait_once(handle)
                if observation.error:
                    self._report(f"wait: {observation.error}")
                if observation.terminal:
                    return observation.outcome
                log_event(
                    "process_wait",
                    level=logging.WARNING if observation.error else logging.INFO,
                    command=name,
                    pid=pid,
                    state=observation.state,
                    error=observation.error,
                )
                if observation.error:
                    # Back off between failed waits.
                    time.sleep(0.01)
