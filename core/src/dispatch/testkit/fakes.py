from __future__ import annotations

import itertools

from dispatch.contracts import ExitCallback, RunCommand
from dispatch.errors import RunError, SpawnError


class FakeProcess:
    """
    In-memory ProcessHandle; tests decide when and how the process exits.
    """

    def __init__(self, pid: int, command: RunCommand, on_exit: ExitCallback) -> None:
        self._pid = pid
        self.command = command
        self.on_exit = on_exit
        self.killed = False
        self.exited = False
        self.kill_calls = 0

    @property
    def pid(self) -> int:
        return self._pid

    def kill(self) -> None:
        self.kill_calls += 1
        if not self.exited:
            self.killed = True

    def exit(self, *, stdout: str = "", stderr: str = "", error: RunError | None = None) -> None:
        if self.exited:
            raise RuntimeError(f"Fake process {self._pid} already exited.")
        self.exited = True
        self.on_exit(error, stdout, stderr)

    def exit_terminated(self) -> None:
        """Exit the way a process killed by SIGTERM does."""
        self.exit(error=SpawnError("Command failed (terminated by SIGTERM)", returncode=-15))


class FakeSpawner:
    """
    Spawner that launches nothing and records every command.
    """

    def __init__(self) -> None:
        self._pids = itertools.count(1000)
        self._processes: list[FakeProcess] = []

    @property
    def processes(self) -> list[FakeProcess]:
        return list(self._processes)

    @property
    def last(self) -> FakeProcess:
        if not self._processes:
            raise RuntimeError("Nothing spawned yet.")
        return self._processes[-1]

    def spawn(self, command: RunCommand, on_exit: ExitCallback) -> FakeProcess:
        process = FakeProcess(next(self._pids), command, on_exit)
        self._processes.append(process)
        return process
