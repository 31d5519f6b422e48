from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

RunStatus = Literal["active", "completed", "error", "cancelled"]

TERMINAL_STATUSES: frozenset[str] = frozenset({"completed", "error", "cancelled"})


@dataclass(frozen=True, slots=True)
class RunStatusReport:
    """
    Point-in-time view of one run.

    Keep this stable: transports serialize it via to_dict().
    """

    run_id: str
    suite: str
    status: RunStatus
    runtime_ms: int
    started_at: datetime
    finished_at: datetime | None = None
    error: BaseException | None = None
    result: Any = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.run_id,
            "suite": self.suite,
            "status": self.status,
            "runtime": self.runtime_ms,
            "started_at_utc": self.started_at.isoformat(),
        }
        if self.finished_at is not None:
            payload["finished_at_utc"] = self.finished_at.isoformat()
        if self.error is not None:
            payload["error"] = str(self.error)
        if self.status == "completed":
            payload["result"] = self.result
        return payload
