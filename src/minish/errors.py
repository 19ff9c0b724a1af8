"""Exception hierarchy for minish."""


class MinishError(Exception):
    """Base exception for interpreter failures."""


class UsageError(ValueError, MinishError):
    """Builtin misuse, such as a missing required argument."""


class ConfigError(ValueError, MinishError):
    """Startup configuration or registry construction errors."""


class LaunchError(MinishError):
    """Base for failures while starting or waiting on an external program."""


class CommandNotFoundError(LaunchError):
    """Raised when a command name does not resolve on the search path."""

    def __init__(self, name: str):
        super().__init__(f"{name}: command not found")
        self.name = name


class SpawnError(LaunchError):
    """Raised when a resolved executable could not be started."""


class WaitError(LaunchError):
    """Raised (or reported) when observing a child's state fails."""
