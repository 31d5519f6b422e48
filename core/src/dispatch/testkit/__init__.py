from .dummies import DummySuite
from .fakes import FakeProcess, FakeSpawner

__all__ = ["DummySuite", "FakeProcess", "FakeSpawner"]
