from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from dispatch.contracts import ProcessHandle, RunStatus, RunStatusReport
from dispatch.errors import RunCancelledError, RunError


@dataclass(frozen=True, slots=True)
class Active:
    pass


@dataclass(frozen=True, slots=True)
class Completed:
    result: Any


@dataclass(frozen=True, slots=True)
class Failed:
    error: RunError


@dataclass(frozen=True, slots=True)
class Cancelled:
    error: RunError


RunOutcome = Active | Completed | Failed | Cancelled

ACTIVE = Active()


def status_of(outcome: RunOutcome) -> RunStatus:
    if isinstance(outcome, Completed):
        return "completed"
    if isinstance(outcome, Failed):
        return "error"
    if isinstance(outcome, Cancelled):
        return "cancelled"
    return "active"


class RunRecord:
    """
    State of one suite execution.

    The outcome moves from Active to a terminal variant exactly once, together
    with the finish timestamp, under the record lock.
    """

    def __init__(
        self,
        run_id: str,
        suite: str,
        process: ProcessHandle,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.run_id = run_id
        self.suite = suite
        self.process = process
        self._clock = clock
        self._lock = threading.Lock()
        self._started = clock()
        self._finished: float | None = None
        self.started_at = datetime.now(UTC)
        self._finished_at: datetime | None = None
        self._outcome: RunOutcome = ACTIVE
        self._cancel_requested = False

    @property
    def outcome(self) -> RunOutcome:
        with self._lock:
            return self._outcome

    @property
    def is_finished(self) -> bool:
        with self._lock:
            return self._finished is not None

    @property
    def cancel_requested(self) -> bool:
        with self._lock:
            return self._cancel_requested

    def request_cancel(self) -> bool:
        """Mark cancellation intent. Returns False if the run already finished."""
        with self._lock:
            if self._finished is not None:
                return False
            self._cancel_requested = True
            return True

    def finalize(self, outcome: Completed | Failed) -> bool:
        """Apply the terminal outcome. Returns False if already finalized."""
        with self._lock:
            if self._finished is not None:
                return False
            if self._cancel_requested:
                error = (
                    outcome.error
                    if isinstance(outcome, Failed)
                    else RunCancelledError(f"Run {self.run_id} was cancelled")
                )
                self._outcome = Cancelled(error)
            else:
                self._outcome = outcome
            self._finished = self._clock()
            self._finished_at = datetime.now(UTC)
            return True

    def snapshot(self) -> RunStatusReport:
        with self._lock:
            outcome = self._outcome
            end = self._finished if self._finished is not None else self._clock()
            finished_at = self._finished_at
        runtime_ms = max(0, int((end - self._started) * 1000))
        error = outcome.error if isinstance(outcome, (Failed, Cancelled)) else None
        result = outcome.result if isinstance(outcome, Completed) else None
        return RunStatusReport(
            run_id=self.run_id,
            suite=self.suite,
            status=status_of(outcome),
            runtime_ms=runtime_ms,
            started_at=self.started_at,
            finished_at=finished_at,
            error=error,
            result=result,
        )
