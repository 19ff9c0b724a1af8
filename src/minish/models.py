"""Value types shared across the read, dispatch and launch layers."""

from __future__ import annotations

import signal
from dataclasses import dataclass
from enum import Enum


class Continuation(Enum):
    """Outcome of one dispatch: keep prompting or stop the loop."""

    CONTINUE = "continue"
    TERMINATE = "terminate"


class OutcomeKind(str, Enum):
    """Terminal states a child process can reach."""

    EXITED = "exited"
    SIGNALED = "signaled"
    # The OS no longer knows the child, so no status can be observed.
    LOST = "lost"


@dataclass(frozen=True)
class ReadResult:
    """One line from the line reader.

    ``exhausted`` is set once the input stream has ended (or failed); ``text``
    still carries any partial content read before that happened.
    """

    text: str
    exhausted: bool = False


@dataclass(frozen=True)
class ProcessOutcome:
    kind: OutcomeKind
    code: int | None = None
    signal: int | None = None

    @classmethod
    def exited(cls, code: int) -> ProcessOutcome:
        return cls(kind=OutcomeKind.EXITED, code=code)

    @classmethod
    def signaled(cls, signo: int) -> ProcessOutcome:
        return cls(kind=OutcomeKind.SIGNALED, signal=signo)

    @classmethod
    def lost(cls) -> ProcessOutcome:
        return cls(kind=OutcomeKind.LOST)

    @property
    def returncode(self) -> int | None:
        """Return code in the ``subprocess.Popen`` convention."""
        if self.kind is OutcomeKind.EXITED:
            return self.code
        if self.kind is OutcomeKind.SIGNALED and self.signal is not None:
            return -self.signal
        return None

    def describe(self) -> str:
        if self.kind is OutcomeKind.EXITED:
            return f"exited with status {self.code}"
        if self.kind is OutcomeKind.SIGNALED:
            return f"killed by {signal_name(self.signal)}"
        return "status unavailable"


@dataclass(frozen=True)
class WaitObservation:
    """A single state change reported by the wait primitive.

    Only observations with ``terminal`` set end the wait loop. Stopped and
    continued children produce non-terminal observations; so do wait errors
    unless the child is also known to be gone.
    """

    terminal: bool
    outcome: ProcessOutcome | None = None
    state: str = ""
    error: str | None = None


def signal_name(signo: int | None) -> str:
    if signo is None:
        return "unknown signal"
    try:
        return signal.Signals(signo).name
    except ValueError:
        return f"signal {signo}"
