from .suite import JsonCommandSuite

__all__ = ["JsonCommandSuite"]
