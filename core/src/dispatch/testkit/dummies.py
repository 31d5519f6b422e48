from __future__ import annotations

import json
import sys
from typing import Any

from dispatch.contracts import RunCommand, Suite, SuiteInfo


class DummySuite(Suite):
    def __init__(self, key: str = "dummy") -> None:
        self._key = key

    @property
    def info(self) -> SuiteInfo:
        return SuiteInfo(key=self._key, name=f"Dummy Suite ({self._key})", version="0.1.0")

    def make_run_command(self) -> RunCommand:
        return RunCommand(command=sys.executable, args=("-c", "print('{}')"))

    def decode_result(self, raw: str) -> Any:
        return json.loads(raw)
