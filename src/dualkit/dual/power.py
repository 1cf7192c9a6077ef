"""Exponentiation by repeated squaring.

The routine only relies on ``*`` being associative, so it works unchanged
for plain numbers, square matrices wrapped in a type with ``__mul__``, and
the dual types in :mod:`dualkit.dual`. For duals this means the power rule
is never written down separately: the derivative of ``x ** n`` comes out of
the product rule applied ``O(log n)`` times.
"""

from __future__ import annotations

from typing import Any, TypeVar

import numpy as np

__all__ = ["power_by_squaring"]

T = TypeVar("T")


def power_by_squaring(base: T, exponent: int, one: Any = None) -> T:
    """Raises ``base`` to a non-negative integer power using only ``*``.

    Args:
        base: Any value whose ``*`` is associative.
        exponent: Non-negative integer exponent.
        one: Multiplicative identity returned for ``exponent == 0``. Only
            needed in that case.

    Returns:
        ``base * base * ... * base`` (``exponent`` factors), or ``one``.

    Raises:
        TypeError: If ``exponent`` is not an integer.
        ValueError: If ``exponent`` is negative, or zero without ``one``.
    """
    if isinstance(exponent, bool) or not isinstance(exponent, (int, np.integer)):
        raise TypeError(f"exponent must be an integer; got {type(exponent).__name__}.")
    n = int(exponent)
    if n < 0:
        raise ValueError(
            f"power_by_squaring needs a non-negative exponent; got {n}. "
            "Take the reciprocal of the positive power instead."
        )
    if n == 0:
        if one is None:
            raise ValueError("exponent 0 requires the multiplicative identity `one`.")
        return one

    result = None
    square = base
    while True:
        if n & 1:
            result = square if result is None else result * square
        n >>= 1
        if not n:
            return result
        square = square * square
