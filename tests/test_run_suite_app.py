from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import pytest
import yaml

import run_suite
from dispatch.errors import NotFoundError
from dispatch.orchestration import Dispatcher


def _write_yaml(path: Path, payload: dict[str, Any]) -> None:
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")


def _python_suite(code: str, **extra: Any) -> dict[str, Any]:
    return {"kind": "json_command", "command": sys.executable, "args": ["-c", code], **extra}


@pytest.fixture
def catalog_yaml(tmp_path: Path) -> Path:
    path = tmp_path / "dispatch.yaml"
    _write_yaml(
        path,
        {
            "dispatcher": {"retain_finished": 10, "log_level": "warning"},
            "suites": {
                "unit": _python_suite(
                    "import json; print(json.dumps({'passed': 3, 'failed': 0}))",
                    description="Canned result",
                ),
                "flaky": _python_suite("import sys; sys.stderr.write('boom'); sys.exit(1)"),
                "slow": _python_suite("import time; time.sleep(60); print('{}')"),
            },
        },
    )
    return path


def _run_main(monkeypatch, *argv: str) -> int:
    monkeypatch.setattr(sys, "argv", ["run_suite.py", *argv])
    return run_suite.main()


def test_completed_run_prints_report_and_exits_zero(
    catalog_yaml: Path, monkeypatch, capsys
) -> None:
    code = _run_main(monkeypatch, str(catalog_yaml), "unit", "--poll-interval", "0.05")

    report = json.loads(capsys.readouterr().out)
    assert code == 0
    assert report["id"] == "1"
    assert report["suite"] == "unit"
    assert report["status"] == "completed"
    assert report["result"] == {"passed": 3, "failed": 0}
    assert "error" not in report


def test_failed_run_exits_one_with_error_text(catalog_yaml: Path, monkeypatch, capsys) -> None:
    code = _run_main(monkeypatch, str(catalog_yaml), "flaky", "--poll-interval", "0.05")

    report = json.loads(capsys.readouterr().out)
    assert code == 1
    assert report["status"] == "error"
    assert "boom" in report["error"]
    assert "result" not in report


@pytest.mark.skipif(sys.platform == "win32", reason="signal semantics differ on Windows")
def test_timeout_cancels_the_run(catalog_yaml: Path, monkeypatch, capsys) -> None:
    code = _run_main(
        monkeypatch, str(catalog_yaml), "slow", "--timeout", "0.2", "--poll-interval", "0.05"
    )

    report = json.loads(capsys.readouterr().out)
    assert code == 1
    assert report["status"] == "cancelled"
    assert "finished_at_utc" in report


def test_unknown_suite_exits_two(catalog_yaml: Path, monkeypatch, capsys) -> None:
    code = _run_main(monkeypatch, str(catalog_yaml), "missing")

    captured = capsys.readouterr()
    assert code == 2
    assert captured.out == ""
    assert "Not found: missing" in captured.err


def test_list_prints_suite_keys(catalog_yaml: Path, monkeypatch, capsys) -> None:
    code = _run_main(monkeypatch, str(catalog_yaml), "--list")

    lines = capsys.readouterr().out.splitlines()
    assert code == 0
    assert "unit\tCanned result" in lines
    assert sorted(line.split("\t")[0] for line in lines) == ["flaky", "slow", "unit"]


def test_missing_suite_argument_exits_two(catalog_yaml: Path, monkeypatch, capsys) -> None:
    code = _run_main(monkeypatch, str(catalog_yaml))

    assert code == 2
    assert "suite name is required" in capsys.readouterr().err


def test_zero_retention_is_a_config_error(tmp_path: Path, monkeypatch, capsys) -> None:
    config_path = tmp_path / "dispatch.yaml"
    _write_yaml(config_path, {"dispatcher": {"retain_finished": 0}, "suites": {}})

    code = _run_main(monkeypatch, str(config_path), "unit")

    captured = capsys.readouterr()
    assert code == 2
    assert "config error" in captured.err
    assert "retain_finished" in captured.err


class _ForgetfulDispatcher(Dispatcher):
    def get_status(self, run_id: str):
        raise NotFoundError(run_id)


def test_run_evicted_while_polling_exits_one(catalog_yaml: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(run_suite, "Dispatcher", _ForgetfulDispatcher)

    code = _run_main(monkeypatch, str(catalog_yaml), "unit", "--poll-interval", "0.05")

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "run 1 is no longer available" in captured.err
