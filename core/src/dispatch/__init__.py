from dispatch.errors import (
    DecodeError,
    NotFoundError,
    OutputError,
    RunCancelledError,
    RunError,
    SpawnError,
)
from dispatch.orchestration import DictSuiteCatalog, Dispatcher

__all__ = [
    "DecodeError",
    "DictSuiteCatalog",
    "Dispatcher",
    "NotFoundError",
    "OutputError",
    "RunCancelledError",
    "RunError",
    "SpawnError",
]
