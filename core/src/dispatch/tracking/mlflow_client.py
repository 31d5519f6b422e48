from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from dispatch.contracts.run_status import RunStatus

try:
    import mlflow as _mlflow
except Exception:  # pragma: no cover - handled via runtime error
    _mlflow = None


def _require_mlflow() -> Any:
    if _mlflow is None:
        raise RuntimeError(
            "mlflow is not installed. Install the 'tracking' extra or provide a fake module for tests."
        )
    return _mlflow


class MlflowTrackingClient:
    """
    MLflow-backed implementation of the TrackingClient facade.

    Uses MlflowClient rather than the fluent API so several runs can be open at once.
    """

    def __init__(
        self,
        *,
        tracking_uri: str | None = None,
        experiment_name: str | None = None,
        experiment_id: str | None = None,
    ) -> None:
        """Create a tracking client with optional MLflow configuration."""
        if experiment_name and experiment_id:
            raise ValueError("Provide either experiment_name or experiment_id, not both.")

        mlflow = _require_mlflow()
        self._client = mlflow.MlflowClient(tracking_uri=tracking_uri)
        self._experiment_id = experiment_id or "0"
        if experiment_name is not None:
            self._experiment_id = self._resolve_experiment(experiment_name)

    @property
    def experiment_id(self) -> str:
        return self._experiment_id

    def start_run(self, *, run_name: str, tags: Mapping[str, str]) -> str:
        """Create an MLflow run and return its id."""
        run = self._client.create_run(
            self._experiment_id,
            tags=dict(tags),
            run_name=run_name,
        )
        return run.info.run_id

    def end_run(self, run_id: str, *, status: RunStatus) -> None:
        """Terminate the MLflow run."""
        self._client.set_terminated(run_id, status=_map_run_status(status))

    def log_param(self, run_id: str, key: str, value: Any) -> None:
        """Log a single parameter."""
        self._client.log_param(run_id, key, value)

    def log_metrics(self, run_id: str, metrics: Mapping[str, float]) -> None:
        """Log multiple metrics."""
        for key, value in metrics.items():
            self._client.log_metric(run_id, key, value)

    def set_tags(self, run_id: str, tags: Mapping[str, str]) -> None:
        """Set tags on the run."""
        for key, value in tags.items():
            self._client.set_tag(run_id, key, value)

    def _resolve_experiment(self, name: str) -> str:
        experiment = self._client.get_experiment_by_name(name)
        if experiment is not None:
            return experiment.experiment_id
        return self._client.create_experiment(name)


def _map_run_status(status: RunStatus) -> str:
    mapping = {
        "active": "RUNNING",
        "completed": "FINISHED",
        "error": "FAILED",
        "cancelled": "KILLED",
    }
    return mapping[status]
