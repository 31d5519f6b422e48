from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from dispatch.contracts import RunCommand, Suite, SuiteInfo


class JsonCommandSuite(Suite):
    """Runs a command that prints one JSON object on stdout."""

    def __init__(
        self,
        key: str,
        *,
        command: str,
        args: Sequence[str] = (),
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
        description: str | None = None,
    ) -> None:
        self._key = key
        self._command = command
        self._args = tuple(args)
        self._cwd = cwd
        self._env = dict(env) if env is not None else None
        self._description = description

    @property
    def info(self) -> SuiteInfo:
        return SuiteInfo(
            key=self._key,
            name=f"JSON command suite '{self._key}'",
            version="0.1.0",
            description=self._description,
        )

    def make_run_command(self) -> RunCommand:
        return RunCommand(command=self._command, args=self._args, cwd=self._cwd, env=self._env)

    def decode_result(self, raw: str) -> dict[str, Any]:
        payload = json.loads(raw)
        if not isinstance(payload, dict):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
        return payload
