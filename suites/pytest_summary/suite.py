from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Any

from dispatch.contracts import RunCommand, Suite, SuiteInfo

from .summary import parse_summary


class PytestSuite(Suite):
    """
    Runs pytest on a path and decodes its terminal summary.

    pytest exits non-zero when any test fails, so such runs end as errors
    with the captured stdout on the SpawnError.
    """

    def __init__(
        self,
        key: str,
        *,
        path: str,
        python: str | None = None,
        extra_args: Sequence[str] = (),
        cwd: str | None = None,
        description: str | None = None,
    ) -> None:
        self._key = key
        self._path = path
        self._python = python or sys.executable
        self._extra_args = tuple(extra_args)
        self._cwd = cwd
        self._description = description

    @property
    def info(self) -> SuiteInfo:
        return SuiteInfo(
            key=self._key,
            name=f"pytest suite '{self._key}'",
            version="0.1.0",
            description=self._description or f"pytest {self._path}",
        )

    def make_run_command(self) -> RunCommand:
        args = ["-m", "pytest", self._path, "-q", "-p", "no:cacheprovider", *self._extra_args]
        return RunCommand(command=self._python, args=tuple(args), cwd=self._cwd)

    def decode_result(self, raw: str) -> dict[str, Any]:
        return parse_summary(raw)
