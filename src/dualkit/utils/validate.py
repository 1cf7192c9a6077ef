"""Validation utilities for dualkit."""

from __future__ import annotations

from numbers import Number
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

__all__ = [
    "is_plain_number",
    "as_point",
    "validate_step_count",
    "check_square_system",
]


def is_plain_number(obj: Any) -> bool:
    """Returns True for Python and NumPy scalars (including 0-d arrays).

    Dual types are deliberately *not* plain numbers, and neither is ``bool``
    from NumPy's point of view (``np.bool_`` is not a ``np.number``).
    """
    if isinstance(obj, np.ndarray):
        return obj.ndim == 0 and obj.dtype != object
    return isinstance(obj, (Number, np.number))


def as_point(x0: ArrayLike, *, name: str = "x0") -> NDArray[np.float64]:
    """Converts an evaluation point to a non-empty 1D float array.

    Row vectors such as ``[[0.3, -0.7]]`` are flattened.

    Args:
        x0: Point at which derivatives are evaluated.
        name: Name used in error messages.

    Returns:
        1D NumPy array with dtype float64.

    Raises:
        ValueError: If ``x0`` is empty.
    """
    arr = np.asarray(x0, dtype=float).ravel()
    if arr.size == 0:
        raise ValueError(f"{name} must be a non-empty 1D array.")
    return arr


def validate_step_count(max_steps: Any, *, name: str = "max_steps") -> int:
    """Checks that an iteration budget is a non-negative integer.

    Raises:
        TypeError: If ``max_steps`` is not an integer.
        ValueError: If ``max_steps`` is negative.
    """
    if isinstance(max_steps, bool) or not isinstance(max_steps, (int, np.integer)):
        raise TypeError(f"{name} must be an integer; got {type(max_steps).__name__}.")
    if max_steps < 0:
        raise ValueError(f"{name} must be >= 0; got {max_steps}.")
    return int(max_steps)


def check_square_system(fx: NDArray[np.floating], x: NDArray[np.floating]) -> None:
    """Checks that a root-finding target maps R^n to R^n.

    Raises:
        ValueError: If the number of equations differs from the number of unknowns.
    """
    if fx.size != x.size:
        raise ValueError(
            f"Newton's method needs a square system; got {fx.size} equations "
            f"for {x.size} unknowns."
        )
