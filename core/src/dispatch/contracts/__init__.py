from .catalog import SuiteCatalog
from .dispatch_config import (
    DispatchConfig,
    DispatcherSettings,
    JsonCommandSuiteConfig,
    PytestSuiteConfig,
    TrackingSettings,
)
from .process import ExitCallback, ProcessHandle, Spawner
from .run_status import TERMINAL_STATUSES, RunStatus, RunStatusReport
from .suite import RunCommand, Suite, SuiteInfo
from .tracking import TrackingClient

__all__ = [
    "DispatchConfig",
    "DispatcherSettings",
    "JsonCommandSuiteConfig",
    "PytestSuiteConfig",
    "TrackingSettings",
    "Suite",
    "SuiteInfo",
    "SuiteCatalog",
    "RunCommand",
    "ExitCallback",
    "ProcessHandle",
    "Spawner",
    "RunStatus",
    "RunStatusReport",
    "TERMINAL_STATUSES",
    "TrackingClient",
]
