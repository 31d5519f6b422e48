from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from dispatch.contracts.suite import RunCommand
from dispatch.errors import RunError

# (error, stdout, stderr); invoked exactly once per spawned process.
ExitCallback = Callable[[RunError | None, str, str], None]


@runtime_checkable
class ProcessHandle(Protocol):
    @property
    def pid(self) -> int | None: ...

    @property
    def killed(self) -> bool:
        """True once a termination signal was requested through kill()."""
        ...

    def kill(self) -> None:
        """Signal termination. No-op once the process has exited."""
        ...


@runtime_checkable
class Spawner(Protocol):
    def spawn(self, command: RunCommand, on_exit: ExitCallback) -> ProcessHandle:
        """
        Launch command without blocking on it.

        stdout/stderr are captured in full and handed to on_exit together.
        on_exit must never be invoked from inside spawn() itself.
        """
        ...
