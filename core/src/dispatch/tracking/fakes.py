from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from dispatch.contracts.run_status import RunStatus


@dataclass(frozen=True, slots=True)
class TrackingCall:
    """Record of a tracking call for assertions in tests."""

    name: str
    args: tuple[Any, ...]
    kwargs: dict[str, Any]


class FakeTrackingClient:
    """
    In-memory TrackingClient for unit tests.
    """

    def __init__(self) -> None:
        self._open_runs: set[str] = set()
        self._run_counter = 0
        self._calls: list[TrackingCall] = []
        self._lock = threading.Lock()

    @property
    def open_run_ids(self) -> set[str]:
        """Return ids of runs started but not yet ended."""
        with self._lock:
            return set(self._open_runs)

    @property
    def calls(self) -> list[TrackingCall]:
        """Return the recorded calls in order."""
        with self._lock:
            return list(self._calls)

    def start_run(self, *, run_name: str, tags: Mapping[str, str]) -> str:
        """Start a fake run and return its id."""
        with self._lock:
            self._run_counter += 1
            run_id = f"run_{self._run_counter}"
            self._open_runs.add(run_id)
        self._record("start_run", run_id, run_name=run_name, tags=dict(tags))
        return run_id

    def end_run(self, run_id: str, *, status: RunStatus) -> None:
        """End an open fake run."""
        self._ensure_open(run_id)
        self._record("end_run", run_id, status=status)
        with self._lock:
            self._open_runs.discard(run_id)

    def log_param(self, run_id: str, key: str, value: Any) -> None:
        """Log a single parameter."""
        self._ensure_open(run_id)
        self._record("log_param", run_id, key=key, value=value)

    def log_metrics(self, run_id: str, metrics: Mapping[str, float]) -> None:
        """Log multiple metrics."""
        self._ensure_open(run_id)
        self._record("log_metrics", run_id, metrics=dict(metrics))

    def set_tags(self, run_id: str, tags: Mapping[str, str]) -> None:
        """Set tags on an open run."""
        self._ensure_open(run_id)
        self._record("set_tags", run_id, tags=dict(tags))

    def _record(self, name: str, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            self._calls.append(TrackingCall(name=name, args=args, kwargs=kwargs))

    def _ensure_open(self, run_id: str) -> None:
        with self._lock:
            if run_id not in self._open_runs:
                raise RuntimeError(f"No open run '{run_id}'. Call start_run first.")
