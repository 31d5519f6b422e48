from __future__ import annotations


class NotFoundError(KeyError):
    """Unknown suite name or run id."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Not found: {self.key}"


class RunError(Exception):
    """Base class for failures captured into a run record."""


class SpawnError(RunError):
    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class OutputError(RunError):
    def __init__(self, stderr: str) -> None:
        super().__init__(stderr)
        self.stderr = stderr


class DecodeError(RunError):
    pass


class RunCancelledError(RunError):
    pass
