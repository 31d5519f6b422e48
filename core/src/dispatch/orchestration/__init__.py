"""Run registry and suite catalog implementations."""

from dispatch.orchestration.catalog import DictSuiteCatalog
from dispatch.orchestration.dispatcher import Dispatcher
from dispatch.orchestration.ids import RunIdGenerator
from dispatch.orchestration.run_record import (
    Active,
    Cancelled,
    Completed,
    Failed,
    RunOutcome,
    RunRecord,
)

__all__ = [
    "Active",
    "Cancelled",
    "Completed",
    "DictSuiteCatalog",
    "Dispatcher",
    "Failed",
    "RunIdGenerator",
    "RunOutcome",
    "RunRecord",
]
