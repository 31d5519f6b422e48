from pathlib import Path
from typing import Any

import pytest
import yaml

from dispatch.configuration import (
    ConfigError,
    load_dispatch_config,
    load_dispatch_config_dict,
    resolve_env_vars,
)
from dispatch.contracts import JsonCommandSuiteConfig, PytestSuiteConfig


def _write_yaml(path: Path, payload: dict[str, Any]) -> None:
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")


def test_load_dispatch_config_parses_suites_and_settings(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("SUITE_ROOT", str(tmp_path))
    config_path = tmp_path / "dispatch.yaml"
    _write_yaml(
        config_path,
        {
            "dispatcher": {"retain_finished": 5, "log_level": "debug"},
            "tracking": {"experiment_name": "nightly"},
            "suites": {
                "unit": {
                    "kind": "json_command",
                    "command": "python",
                    "args": ["-c", "print('{}')"],
                    "cwd": "${SUITE_ROOT}",
                },
                "smoke": {"kind": "pytest", "path": "${SUITE_ROOT}/tests"},
            },
        },
    )

    config = load_dispatch_config(config_path)

    assert config.dispatcher.retain_finished == 5
    assert config.dispatcher.log_level == "DEBUG"
    assert config.tracking is not None
    assert config.tracking.experiment_name == "nightly"
    unit = config.suites["unit"]
    smoke = config.suites["smoke"]
    assert isinstance(unit, JsonCommandSuiteConfig)
    assert unit.cwd == str(tmp_path)
    assert isinstance(smoke, PytestSuiteConfig)
    assert smoke.path == f"{tmp_path}/tests"


def test_defaults_when_sections_missing() -> None:
    config = load_dispatch_config_dict({})

    assert config.suites == {}
    assert config.tracking is None
    assert config.dispatcher.retain_finished is None
    assert config.dispatcher.log_level == "INFO"


def test_missing_env_var_is_config_error(monkeypatch) -> None:
    monkeypatch.delenv("SUITE_DISPATCH_UNSET", raising=False)

    with pytest.raises(ConfigError, match="SUITE_DISPATCH_UNSET"):
        resolve_env_vars({"suites": {"a": {"path": "${SUITE_DISPATCH_UNSET}"}}})


def test_validation_errors_are_flattened() -> None:
    with pytest.raises(ConfigError) as excinfo:
        load_dispatch_config_dict(
            {"suites": {"unit": {"kind": "json_command"}}, "unexpected": True}
        )

    message = str(excinfo.value)
    assert "config.suites.unit.json_command.command" in message
    assert "config.unexpected" in message


def test_unknown_suite_kind_is_rejected() -> None:
    with pytest.raises(ConfigError, match="config.suites.unit"):
        load_dispatch_config_dict({"suites": {"unit": {"kind": "shell", "command": "ls"}}})


def test_non_mapping_yaml_root_is_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "dispatch.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="YAML root must be a mapping"):
        load_dispatch_config(config_path)


def test_malformed_yaml_is_config_error(tmp_path: Path) -> None:
    config_path = tmp_path / "dispatch.yaml"
    config_path.write_text("suites: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_dispatch_config(config_path)


@pytest.mark.parametrize("retain_finished", [0, -3])
def test_retain_finished_must_be_positive(retain_finished: int) -> None:
    with pytest.raises(ConfigError, match="config.dispatcher.retain_finished"):
        load_dispatch_config_dict({"dispatcher": {"retain_finished": retain_finished}})
