"""Line readers for the interactive loop."""

from __future__ import annotations

import sys
from typing import Any, Protocol, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from .config import ShellConfig
from .constants import ERROR_PREFIX, READ_CHUNK_SIZE
from .models import ReadResult


class LineReader(Protocol):
    def read_line(self, prompt: str) -> ReadResult: ...


def _strip_terminator(text: str) -> str:
    if text.endswith("\n"):
        text = text[:-1]
        if text.endswith("\r"):
            text = text[:-1]
    return text


class StreamLineReader:
    """Read lines from a text stream, printing the prompt to ``stdout``.

    Each line is assembled from ``readline(chunk_size)`` calls, so a line of
    any length is returned whole.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        chunk_size: int = READ_CHUNK_SIZE,
    ):
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._stderr = stderr if stderr is not None else sys.stderr
        self._chunk_size = chunk_size

    def read_line(self, prompt: str) -> ReadResult:
        self._stdout.write(prompt)
        self._stdout.flush()

        chunks: list[str] = []
        try:
            while True:
                chunk = self._stdin.readline(self._chunk_size)
                if not chunk:
                    return ReadResult("".join(chunks), exhausted=True)
                chunks.append(chunk)
                if chunk.endswith("\n"):
                    return ReadResult(_strip_terminator("".join(chunks)))
        except (OSError, UnicodeDecodeError, ValueError) as e:
            print(f"{ERROR_PREFIX} read error: {e}", file=self._stderr)
            return ReadResult("".join(chunks), exhausted=True)


class InteractiveLineReader:
    """Line editing and history via a prompt_toolkit session."""

    def __init__(self, session: Any):
        self._session = session

    def read_line(self, prompt: str) -> ReadResult:
        try:
            text = self._session.prompt(prompt)
        except EOFError:
            return ReadResult("", exhausted=True)
        return ReadResult(_strip_terminator(text))


def create_prompt_session(config: ShellConfig) -> PromptSession:
    """Create a prompt-toolkit session backed by the configured history file."""
    history_path = config.history_path
    history_path.parent.mkdir(parents=True, exist_ok=True)
    return PromptSession(history=FileHistory(str(history_path)))


def create_line_reader(
    config: ShellConfig,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> LineReader:
    """Pick the interactive reader when enabled and stdin is a terminal."""
    stdin = stdin if stdin is not None else sys.stdin
    if config.line_editing and stdin.isatty():
        return InteractiveLineReader(create_prompt_session(config))
    return StreamLineReader(stdin=stdin, stdout=stdout, stderr=stderr)
