from __future__ import annotations

from dispatch.contracts import (
    DispatchConfig,
    JsonCommandSuiteConfig,
    PytestSuiteConfig,
    Suite,
)
from dispatch.orchestration import DictSuiteCatalog
from suites.json_command import JsonCommandSuite
from suites.pytest_summary import PytestSuite


def build_catalog(config: DispatchConfig) -> DictSuiteCatalog:
    suites: dict[str, Suite] = {}
    for name, suite_config in config.suites.items():
        if isinstance(suite_config, JsonCommandSuiteConfig):
            suites[name] = JsonCommandSuite(
                name,
                command=suite_config.command,
                args=suite_config.args,
                cwd=suite_config.cwd,
                env=suite_config.env,
                description=suite_config.description,
            )
        elif isinstance(suite_config, PytestSuiteConfig):
            suites[name] = PytestSuite(
                name,
                path=suite_config.path,
                python=suite_config.python,
                extra_args=suite_config.extra_args,
                cwd=suite_config.cwd,
                description=suite_config.description,
            )
        else:  # pragma: no cover - guarded by the config discriminator
            raise TypeError(f"Unsupported suite config: {type(suite_config).__name__}")
    return DictSuiteCatalog(suites=suites)
