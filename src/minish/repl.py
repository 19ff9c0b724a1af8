"""The read, tokenize, dispatch loop."""

from __future__ import annotations

import logging
import sys
import time
import traceback
from typing import TextIO

from .constants import DEFAULT_PROMPT, ERROR_PREFIX
from .dispatcher import Dispatcher
from .line_reader import LineReader
from .logging_utils import log_event
from .models import Continuation
from .tokenizer import split_line


def _report_unexpected_error(error: Exception, stderr: TextIO, debug: bool) -> None:
    """Print an unexpected exception with optional debug traceback."""
    print(f"{ERROR_PREFIX} internal error: {error}", file=stderr)
    if debug:
        traceback.print_exc(file=stderr)


def _dispatch(
    dispatcher: Dispatcher, argv: list[str], stderr: TextIO, debug: bool
) -> Continuation:
    # Error boundary: nothing a single command does may end the session.
    try:
        return dispatcher.dispatch(argv)
    except Exception as e:
        log_event(
            "command_error",
            level=logging.ERROR,
            command=argv[0],
            error_type=type(e).__name__,
            error=str(e),
        )
        _report_unexpected_error(e, stderr, debug)
        return Continuation.CONTINUE


def run_repl(
    reader: LineReader,
    dispatcher: Dispatcher,
    *,
    prompt: str = DEFAULT_PROMPT,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    debug: bool = False,
) -> int:
    """Prompt and run commands until ``exit`` or end of input."""
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr
    started = time.monotonic()
    commands = 0
    reason = "exit"

    while True:
        try:
            line = reader.read_line(prompt)
        except KeyboardInterrupt:
            # Ctrl-C at the prompt drops the pending line.
            print(file=stdout)
            continue

        argv = split_line(line.text)

        if line.exhausted:
            stdout.write("\n")
            stdout.flush()
            if argv:
                commands += 1
                _dispatch(dispatcher, argv, stderr, debug)
            reason = "end_of_input"
            break

        if argv:
            commands += 1
        if _dispatch(dispatcher, argv, stderr, debug) is Continuation.TERMINATE:
            break

    log_event(
        "app_stop",
        reason=reason,
        commands=commands,
        uptime_ms=round((time.monotonic() - started) * 1000),
    )
    return 0
