"""Builtin commands and the registry that maps names to them."""

from __future__ import annotations

import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Iterator, TextIO

from .constants import ERROR_PREFIX
from .errors import ConfigError, UsageError
from .models import Continuation


@dataclass(frozen=True)
class ShellContext:
    """Streams and registry handed to every builtin executor."""

    stdout: TextIO
    stderr: TextIO
    registry: BuiltinRegistry


@dataclass(frozen=True)
class CommandHandler:
    """Defines how to execute a builtin."""

    executor: Callable[[list[str], ShellContext], Continuation]
    usage: str = ""
    summary: str = ""


class BuiltinRegistry:
    """Read-only mapping from builtin name to handler.

    Built once at startup; lookups are exact and case-sensitive.
    """

    def __init__(self, entries: Iterable[tuple[str, CommandHandler]]):
        table: dict[str, CommandHandler] = {}
        for name, handler in entries:
            if not name or name != name.strip() or len(name.split()) != 1:
                raise ConfigError(f"Invalid builtin name: {name!r}")
            if name in table:
                raise ConfigError(f"Duplicate builtin: {name}")
            table[name] = handler
        self._table = MappingProxyType(table)

    def get(self, name: str) -> CommandHandler | None:
        return self._table.get(name)

    def names(self) -> list[str]:
        """Registered names in lexicographic order."""
        return sorted(self._table)

    def __contains__(self, name: object) -> bool:
        return name in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._table)


def _exec_cd(args: list[str], ctx: ShellContext) -> Continuation:
    if len(args) < 1:
        raise UsageError("cd: missing argument")
    target = args[0]
    try:
        os.chdir(target)
    except OSError as e:
        print(f"{ERROR_PREFIX} cd: {target}: {e.strerror or e}", file=ctx.stderr)
    return Continuation.CONTINUE


def _exec_pwd(args: list[str], ctx: ShellContext) -> Continuation:
    try:
        cwd = os.getcwd()
    except OSError as e:
        print(f"{ERROR_PREFIX} pwd: {e.strerror or e}", file=ctx.stderr)
        return Continuation.CONTINUE
    print(cwd, file=ctx.stdout)
    return Continuation.CONTINUE


def _exec_help(args: list[str], ctx: ShellContext) -> Continuation:
    for name in ctx.registry.names():
        print(name, file=ctx.stdout)
    return Continuation.CONTINUE


def _exec_exit(args: list[str], ctx: ShellContext) -> Continuation:
    return Continuation.TERMINATE


DEFAULT_BUILTINS: tuple[tuple[str, CommandHandler], ...] = (
    ("cd", CommandHandler(_exec_cd, usage="cd <dir>", summary="Change the working directory")),
    ("pwd", CommandHandler(_exec_pwd, usage="pwd", summary="Print the working directory")),
    ("help", CommandHandler(_exec_help, usage="help", summary="List builtin commands")),
    ("exit", CommandHandler(_exec_exit, usage="exit", summary="Leave the interpreter")),
)


def build_registry(
    entries: Iterable[tuple[str, CommandHandler]] = DEFAULT_BUILTINS,
) -> BuiltinRegistry:
    return BuiltinRegistry(entries)
