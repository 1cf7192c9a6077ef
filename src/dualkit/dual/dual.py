"""Provides the scalar dual number :class:`Dual`.

A ``Dual`` is the first-order Taylor polynomial (jet) of a scalar function at
a point: ``Dual(f(a), f'(a))``. Evaluating any composition of the supported
operations on ``Dual(a, 1)`` yields the value and the exact derivative of the
composition at ``a``.

Examples:
    >>> from dualkit.dual.dual import Dual
    >>> x = Dual.variable(3.0)
    >>> y = x * x + 2 * x
    >>> y.value, y.derivative
    (15.0, 8.0)
"""

from __future__ import annotations

from typing import Any

from dualkit.dual.base import DualBase, _one_like, _unbox
from dualkit.utils.validate import is_plain_number

__all__ = ["Dual"]


class Dual(DualBase):
    """Value and first derivative of a scalar function at a point.

    The component type is not coerced: ints, floats, NumPy scalars, complex
    numbers and :class:`fractions.Fraction` are all carried through
    unchanged, so results are exact up to the rounding of that type.

    Instances are immutable and compare equal when both the value and the
    derivative are equal.
    """

    __slots__ = ()

    def __init__(self, value: Any, derivative: Any):
        """Initialises a dual number.

        Args:
            value: Function value at the evaluation point.
            derivative: Derivative at the evaluation point.

        Raises:
            TypeError: If either component is not a plain number.
        """
        value = _unbox(value)
        derivative = _unbox(derivative)
        if not is_plain_number(value) or not is_plain_number(derivative):
            raise TypeError(
                "Dual components must be plain numbers; got "
                f"{type(value).__name__} and {type(derivative).__name__}."
            )
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_tangent", derivative)

    @classmethod
    def variable(cls, value: Any) -> Dual:
        """Seeds the identity function at ``value`` (derivative one)."""
        return cls(value, _one_like(value))

    @classmethod
    def constant(cls, value: Any) -> Dual:
        """Wraps ``value`` as a constant (derivative zero)."""
        return cls(value, value * 0)

    @property
    def derivative(self) -> Any:
        """The derivative at the evaluation point."""
        return self._tangent

    def __repr__(self) -> str:
        return f"Dual({self._value!r}, {self._tangent!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dual):
            return NotImplemented
        return bool(self._value == other._value and self._tangent == other._tangent)

    def __hash__(self) -> int:
        return hash((self._value, self._tangent))
