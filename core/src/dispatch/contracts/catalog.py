from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from dispatch.contracts.suite import RunCommand, Suite, SuiteInfo


@runtime_checkable
class SuiteCatalog(Protocol):
    def has(self, suite: str) -> bool: ...

    def get(self, suite: str) -> Suite:
        """Return suite for name or raise NotFoundError."""
        ...

    def list(self) -> Iterable[SuiteInfo]:
        """List available suites (for UI / debugging)."""
        ...

    def make_run_command(self, suite: str) -> RunCommand: ...

    def decode_result(self, suite: str, raw: str) -> Any: ...
