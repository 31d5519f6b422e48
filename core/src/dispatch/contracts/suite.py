from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class SuiteInfo:
    key: str
    name: str
    version: str = "0.1.0"
    description: str | None = None


@dataclass(frozen=True, slots=True)
class RunCommand:
    """Executable program plus ordered arguments; never run through a shell."""

    command: str
    args: Sequence[str] = field(default_factory=tuple)
    cwd: str | None = None
    env: Mapping[str, str] | None = None

    def argv(self) -> list[str]:
        return [self.command, *self.args]


@runtime_checkable
class Suite(Protocol):
    """
    Suite interface contract.

    Suites know how to build a command line and how to read what it printed.
    """

    @property
    def info(self) -> SuiteInfo: ...

    def make_run_command(self) -> RunCommand: ...

    def decode_result(self, raw: str) -> Any:
        """
        Decode captured standard output into a structured result.

        Raise any exception on malformed output.
        """
        ...
