from .suite import PytestSuite
from .summary import parse_summary

__all__ = ["PytestSuite", "parse_summary"]
