"""CLI entry and startup wiring."""

from __future__ import annotations

import argparse
import os
import sys

from . import __version__
from .builtin_commands import build_registry
from .config import ShellConfig, load_config
from .constants import APP_NAME, ERROR_PREFIX
from .dispatcher import Dispatcher
from .errors import MinishError
from .launcher import ProcessLauncher
from .line_reader import create_line_reader
from .logging_utils import log_event, setup_logging
from .repl import run_repl


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
        setup_logging(config.log_file)
        dispatcher = build_dispatcher()
        reader = create_line_reader(config)
    except (MinishError, OSError) as exc:
        print(f"{ERROR_PREFIX} {exc}", file=sys.stderr)
        return 1

    _log_start(config)
    return run_repl(reader, dispatcher, prompt=config.prompt, debug=config.debug)


def build_dispatcher() -> Dispatcher:
    """Assemble the builtin table and launcher for one session."""
    return Dispatcher(registry=build_registry(), launcher=ProcessLauncher())


def _log_start(config: ShellConfig) -> None:
    log_event(
        "app_start",
        cwd=os.getcwd(),
        prompt=config.prompt,
        line_editing=config.line_editing,
        log_file=config.log_file,
        pid=os.getpid(),
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="A minimal interactive command interpreter.",
    )
    parser.add_argument(
        "--prompt",
        default=None,
        help="Prompt marker printed before each line (default: '> ').",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Write structured session logs to this file.",
    )
    parser.add_argument(
        "--line-editing",
        action="store_true",
        help="Enable line editing and history when stdin is a terminal.",
    )
    parser.add_argument(
        "--history-file",
        default=None,
        help="History file used with --line-editing (default: ~/.minish_history).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser
