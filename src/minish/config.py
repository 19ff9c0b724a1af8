"""Startup configuration for minish."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .constants import (
    DEFAULT_HISTORY_FILE,
    DEFAULT_PROMPT,
    ENV_DEBUG,
    ENV_LOG_FILE,
    ENV_PROMPT,
)
from .errors import ConfigError


@dataclass(frozen=True)
class ShellConfig:
    prompt: str = DEFAULT_PROMPT
    log_file: str | None = None
    line_editing: bool = False
    history_file: str = DEFAULT_HISTORY_FILE
    debug: bool = False

    @property
    def history_path(self) -> Path:
        return Path(os.path.expanduser(self.history_file))


def _env_flag(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() not in ("", "0", "false", "no", "off")


def load_config(args: Any, environ: Mapping[str, str] | None = None) -> ShellConfig:
    """Build configuration from parsed CLI args, falling back to environment.

    Command-line values win over environment variables.
    """
    env = os.environ if environ is None else environ

    prompt = getattr(args, "prompt", None)
    if prompt is None:
        prompt = env.get(ENV_PROMPT, DEFAULT_PROMPT)
    if "\n" in prompt:
        raise ConfigError("Prompt must not contain a newline")

    log_file = getattr(args, "log_file", None) or env.get(ENV_LOG_FILE) or None

    history_file = getattr(args, "history_file", None) or DEFAULT_HISTORY_FILE

    return ShellConfig(
        prompt=prompt,
        log_file=log_file,
        line_editing=bool(getattr(args, "line_editing", False)),
        history_file=history_file,
        debug=_env_flag(env.get(ENV_DEBUG)),
    )
