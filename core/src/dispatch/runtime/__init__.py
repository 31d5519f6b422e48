"""Runtime helpers for launching suite processes."""

from dispatch.runtime.process import SubprocessHandle, SubprocessSpawner

__all__ = ["SubprocessHandle", "SubprocessSpawner"]
