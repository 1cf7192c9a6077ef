"""Utility functions for dualkit package."""

from .linalg import solve_linear
from .sandbox import get_partial_function

__all__ = [
    "solve_linear",
    "get_partial_function",
]
