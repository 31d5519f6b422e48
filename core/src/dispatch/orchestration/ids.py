from __future__ import annotations

import itertools
import threading


class RunIdGenerator:
    """Issues "1", "2", "3", ... for the lifetime of one dispatcher."""

    def __init__(self, *, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            return str(next(self._counter))
