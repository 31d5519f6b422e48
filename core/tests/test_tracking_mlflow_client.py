import importlib
import sys

from dispatch.tracking import mlflow_client


class _FakeRunInfo:
    def __init__(self, run_id: str) -> None:
        self.run_id = run_id


class _FakeRun:
    def __init__(self, run_id: str) -> None:
        self.info = _FakeRunInfo(run_id)


class _FakeExperiment:
    def __init__(self, experiment_id: str) -> None:
        self.experiment_id = experiment_id


class FakeMlflowClient:
    def __init__(self, module: "FakeMlflow", tracking_uri: str | None = None) -> None:
        self._module = module
        module.calls.append(("MlflowClient", (), {"tracking_uri": tracking_uri}))

    def get_experiment_by_name(self, name: str) -> _FakeExperiment | None:
        self._module.calls.append(("get_experiment_by_name", (name,), {}))
        experiment_id = self._module.experiments.get(name)
        return None if experiment_id is None else _FakeExperiment(experiment_id)

    def create_experiment(self, name: str) -> str:
        self._module.calls.append(("create_experiment", (name,), {}))
        experiment_id = str(len(self._module.experiments) + 1)
        self._module.experiments[name] = experiment_id
        return experiment_id

    def create_run(self, experiment_id: str, *, tags: dict, run_name: str) -> _FakeRun:
        self._module.calls.append(
            ("create_run", (experiment_id,), {"tags": tags, "run_name": run_name})
        )
        return _FakeRun(f"mlflow_{len(self._module.calls)}")

    def set_terminated(self, run_id: str, *, status: str) -> None:
        self._module.calls.append(("set_terminated", (run_id,), {"status": status}))

    def log_param(self, run_id: str, key: str, value: object) -> None:
        self._module.calls.append(("log_param", (run_id, key, value), {}))

    def log_metric(self, run_id: str, key: str, value: float) -> None:
        self._module.calls.append(("log_metric", (run_id, key, value), {}))

    def set_tag(self, run_id: str, key: str, value: str) -> None:
        self._module.calls.append(("set_tag", (run_id, key, value), {}))


class FakeMlflow:
    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[object, ...], dict[str, object]]] = []
        self.experiments: dict[str, str] = {"existing": "7"}

    def MlflowClient(self, tracking_uri: str | None = None) -> FakeMlflowClient:  # noqa: N802
        return FakeMlflowClient(self, tracking_uri=tracking_uri)


def test_mlflow_tracking_client_uses_fake_module(monkeypatch):
    fake = FakeMlflow()
    monkeypatch.setitem(sys.modules, "mlflow", fake)

    module = importlib.reload(mlflow_client)
    client = module.MlflowTrackingClient(tracking_uri="http://mlflow", experiment_name="demo")

    run_id = client.start_run(run_name="unit#1", tags={"suite": "unit"})
    client.log_param(run_id, "suite", "unit")
    client.log_metrics(run_id, {"passed": 3.0, "failed": 0.0})
    client.set_tags(run_id, {"error": "none"})
    client.end_run(run_id, status="cancelled")

    assert client.experiment_id == "2"
    call_names = [call[0] for call in fake.calls]
    assert call_names[:3] == ["MlflowClient", "get_experiment_by_name", "create_experiment"]
    assert call_names.count("log_metric") == 2
    assert ("set_terminated", (run_id,), {"status": "KILLED"}) in fake.calls


def test_mlflow_tracking_client_reuses_existing_experiment(monkeypatch):
    fake = FakeMlflow()
    monkeypatch.setitem(sys.modules, "mlflow", fake)

    module = importlib.reload(mlflow_client)
    client = module.MlflowTrackingClient(experiment_name="existing")

    assert client.experiment_id == "7"
    assert "create_experiment" not in [call[0] for call in fake.calls]


def test_mlflow_tracking_client_maps_statuses():
    assert mlflow_client._map_run_status("completed") == "FINISHED"
    assert mlflow_client._map_run_status("error") == "FAILED"
    assert mlflow_client._map_run_status("cancelled") == "KILLED"
    assert mlflow_client._map_run_status("active") == "RUNNING"
