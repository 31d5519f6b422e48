from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from dispatch.contracts import RunCommand, Suite, SuiteCatalog, SuiteInfo
from dispatch.errors import NotFoundError


@dataclass
class DictSuiteCatalog(SuiteCatalog):
    suites: dict[str, Suite]

    def has(self, suite: str) -> bool:
        return suite in self.suites

    def get(self, suite: str) -> Suite:
        try:
            return self.suites[suite]
        except KeyError as e:
            raise NotFoundError(suite) from e

    def list(self) -> Iterable[SuiteInfo]:
        return [s.info for s in self.suites.values()]

    def make_run_command(self, suite: str) -> RunCommand:
        return self.get(suite).make_run_command()

    def decode_result(self, suite: str, raw: str) -> Any:
        return self.get(suite).decode_result(raw)
