from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from dispatch.contracts.run_status import RunStatus


@runtime_checkable
class TrackingClient(Protocol):
    """
    Facade contract for experiment/run tracking backends.

    Calls are addressed by tracking run id since many suite runs are open at once.
    """

    def start_run(self, *, run_name: str, tags: Mapping[str, str]) -> str:
        """Start a new tracking run and return its id."""
        ...

    def end_run(self, run_id: str, *, status: RunStatus) -> None:
        """End the tracking run with the given suite run status."""
        ...

    def log_param(self, run_id: str, key: str, value: Any) -> None:
        """Log a single parameter."""
        ...

    def log_metrics(self, run_id: str, metrics: Mapping[str, float]) -> None:
        """Log multiple metrics."""
        ...

    def set_tags(self, run_id: str, tags: Mapping[str, str]) -> None:
        """Set tags on the tracking run."""
        ...
