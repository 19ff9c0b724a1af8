"""Routing a tokenized command to a builtin or an external program."""

from __future__ import annotations

import logging
import sys
import time
from typing import TextIO

from .builtin_commands import BuiltinRegistry, ShellContext
from .constants import ERROR_PREFIX
from .errors import UsageError
from .launcher import ProcessLauncher
from .logging_utils import log_event
from .models import Continuation


class Dispatcher:
    """Builtins first, then the process launcher.

    A builtin always shadows an external program with the same name.
    """

    def __init__(
        self,
        registry: BuiltinRegistry,
        launcher: ProcessLauncher,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ):
        self.registry = registry
        self.launcher = launcher
        self._context = ShellContext(
            stdout=stdout if stdout is not None else sys.stdout,
            stderr=stderr if stderr is not None else sys.stderr,
            registry=registry,
        )

    def dispatch(self, argv: list[str]) -> Continuation:
        if not argv:
            return Continuation.CONTINUE

        command = argv[0]
        started = time.monotonic()

        handler = self.registry.get(command)
        if handler is not None:
            kind = "builtin"
            result = self._run_builtin(command, handler.executor, argv[1:])
            outcome = result.value
        else:
            kind = "external"
            result = self.launcher.launch(argv)
            last = self.launcher.last_outcome
            outcome = last.describe() if last is not None else "not started"

        log_event(
            "command_exec",
            command=command,
            kind=kind,
            argc=len(argv) - 1,
            outcome=outcome,
            elapsed_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return result

    def _run_builtin(self, command, executor, args) -> Continuation:
        try:
            return executor(args, self._context)
        except UsageError as e:
            print(f"{ERROR_PREFIX} {e}", file=self._context.stderr)
            log_event(
                "command_error",
                level=logging.WARNING,
                command=command,
                kind="builtin",
                error_type=type(e).__name__,
                error=str(e),
            )
            return Continuation.CONTINUE
