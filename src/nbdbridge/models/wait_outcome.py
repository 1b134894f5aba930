"""Result model for waiting on child processes."""

import os
from dataclasses import dataclass
from enum import Enum


class WaitKind(Enum):
    EXITED = "exited"
    INTERRUPTED = "interrupted"
    NONE_LEFT = "none_left"


@dataclass(frozen=True)
class WaitOutcome:
    """What ended a call to ``ChildSupervisor.wait_for_any``."""

    kind: WaitKind
    pid: int | None = None
    status: int | None = None

    @classmethod
    def exited(cls, pid: int, status: int) -> "WaitOutcome":
        return cls(WaitKind.EXITED, pid=pid, status=status)

    @classmethod
    def interrupted(cls) -> "WaitOutcome":
        return cls(WaitKind.INTERRUPTED)

    @classmethod
    def none_left(cls) -> "WaitOutcome":
        return cls(WaitKind.NONE_LEFT)

    @property
    def exit_code(self) -> int | None:
        """Exit code of the reaped child, negative when killed by a signal."""
        if self.status is None:
            return None
        return os.waitstatus_to_exitcode(self.status)
