"""Operator machinery shared by :class:`~dualkit.dual.dual.Dual` and
:class:`~dualkit.dual.multidual.MultiDual`.

Both types are a value paired with a *tangent*: a single derivative for
``Dual`` and a 1D array of partial derivatives for ``MultiDual``. Every
arithmetic rule below is written once in terms of ``(value, tangent)``;
because NumPy broadcasts scalar-times-array, the same formula yields the
scalar product rule and its elementwise multivariate form.

Dispatch is explicit per operand combination:

* dual (op) dual of the same kind: full rule, after the subclass has
  checked the pair is compatible;
* dual (op) plain number: the number is a constant with zero tangent;
* plain number (op) dual: handled by the reflected methods;
* anything else returns ``NotImplemented`` so Python raises ``TypeError``.

NumPy ufuncs reach the same methods through ``__array_ufunc__``; the
elementary functions (``np.sin`` and friends) are looked up in the
registry of :mod:`dualkit.dual.elementary`.
"""

from __future__ import annotations

import operator
from functools import partial
from numbers import Complex, Real
from typing import Any

import numpy as np

from dualkit.dual.power import power_by_squaring
from dualkit.errors import UnsupportedOperationError
from dualkit.utils.validate import is_plain_number

__all__ = ["DualBase"]


def _unbox(x: Any) -> Any:
    """Returns the element of a 0-d array, or ``x`` unchanged."""
    if isinstance(x, np.ndarray) and x.ndim == 0:
        return x[()]
    return x


def _one_like(x: Any) -> Any:
    """Returns the multiplicative identity in the numeric type of ``x``."""
    return x * 0 + 1


def _as_object_operand(x: Any) -> Any:
    # A dual wrapped in a 0-d object array no longer triggers __array_ufunc__.
    if isinstance(x, DualBase):
        box = np.empty((), dtype=object)
        box[()] = x
        return box
    if isinstance(x, np.ndarray):
        return x.astype(object)
    return x


_UNARY_UFUNCS = {
    np.negative: operator.neg,
    np.positive: operator.pos,
    np.absolute: operator.abs,
    np.square: lambda x: x * x,
    np.reciprocal: lambda x: 1 / x,
}

_BINARY_UFUNCS = {
    np.add: ("__add__", "__radd__"),
    np.subtract: ("__sub__", "__rsub__"),
    np.multiply: ("__mul__", "__rmul__"),
    np.true_divide: ("__truediv__", "__rtruediv__"),
    np.power: ("__pow__", "__rpow__"),
}


def _apply_scalar(ufunc: np.ufunc, args: tuple) -> Any:
    """Applies ``ufunc`` to scalar arguments, at least one of them a dual."""
    args = tuple(_unbox(a) for a in args)
    if not any(isinstance(a, DualBase) for a in args):
        return ufunc(*args)

    if ufunc in _UNARY_UFUNCS:
        return _UNARY_UFUNCS[ufunc](args[0])

    if ufunc in _BINARY_UFUNCS:
        forward, reflected = _BINARY_UFUNCS[ufunc]
        left, right = args
        result = NotImplemented
        if isinstance(left, DualBase):
            result = getattr(left, forward)(right)
        if result is NotImplemented and isinstance(right, DualBase):
            result = getattr(right, reflected)(left)
        if result is NotImplemented:
            raise TypeError(
                f"unsupported operand types for {ufunc.__name__}: "
                f"{type(left).__name__!r} and {type(right).__name__!r}"
            )
        return result

    from dualkit.dual.elementary import rule_for_ufunc

    return rule_for_ufunc(ufunc).lifted(args[0])


def _apply_elementwise(ufunc: np.ufunc, args: tuple) -> np.ndarray:
    """Applies ``ufunc`` over arrays mixing duals and numbers; returns an object array."""
    boxed = [_as_object_operand(a) for a in args]
    kernel = np.frompyfunc(lambda *xs: _apply_scalar(ufunc, xs), ufunc.nin, 1)
    return kernel(*boxed)


class DualBase:
    """Immutable value/tangent pair with the first-order arithmetic rules.

    Subclasses provide the public constructor and may override
    :meth:`_check_compatible` to reject operand pairs.
    """

    __slots__ = ("_value", "_tangent")

    @classmethod
    def _from_parts(cls, value: Any, tangent: Any) -> DualBase:
        obj = object.__new__(cls)
        object.__setattr__(obj, "_value", value)
        object.__setattr__(obj, "_tangent", tangent)
        return obj

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        return type(self), (self._value, self._tangent)

    @property
    def value(self) -> Any:
        """The function value at the evaluation point."""
        return self._value

    def _check_compatible(self, other: DualBase) -> None:
        """Hook for subclasses; raise if ``other`` cannot be combined with ``self``."""

    def _operand(self, other: Any) -> tuple[Any, Any] | None:
        """Returns ``(value, tangent)`` of ``other``; ``tangent`` is None for constants.

        Returns None when ``other`` cannot be combined with ``self`` at all.
        """
        other = _unbox(other)
        if isinstance(other, DualBase):
            if type(other) is not type(self):
                return None
            self._check_compatible(other)
            return other._value, other._tangent
        if is_plain_number(other):
            return other, None
        return None

    def _chain(self, value: Any, slope: Any) -> DualBase:
        """Result of applying a function with the given value and local slope."""
        return self._from_parts(value, slope * self._tangent)

    def _one(self) -> DualBase:
        return self._from_parts(_one_like(self._value), self._tangent * 0)

    # Sum rule
    def __add__(self, other):
        parts = self._operand(other)
        if parts is None:
            return NotImplemented
        value, tangent = parts
        if tangent is None:
            return self._from_parts(self._value + value, self._tangent)
        return self._from_parts(self._value + value, self._tangent + tangent)

    def __radd__(self, other):
        other = _unbox(other)
        if not is_plain_number(other):
            return NotImplemented
        return self._from_parts(other + self._value, self._tangent)

    def __sub__(self, other):
        parts = self._operand(other)
        if parts is None:
            return NotImplemented
        value, tangent = parts
        if tangent is None:
            return self._from_parts(self._value - value, self._tangent)
        return self._from_parts(self._value - value, self._tangent - tangent)

    def __rsub__(self, other):
        other = _unbox(other)
        if not is_plain_number(other):
            return NotImplemented
        return self._from_parts(other - self._value, -self._tangent)

    # Product rule
    def __mul__(self, other):
        parts = self._operand(other)
        if parts is None:
            return NotImplemented
        value, tangent = parts
        if tangent is None:
            return self._from_parts(self._value * value, self._tangent * value)
        return self._from_parts(
            self._value * value,
            self._tangent * value + self._value * tangent,
        )

    def __rmul__(self, other):
        other = _unbox(other)
        if not is_plain_number(other):
            return NotImplemented
        return self._from_parts(other * self._value, other * self._tangent)

    # Quotient rule
    def __truediv__(self, other):
        parts = self._operand(other)
        if parts is None:
            return NotImplemented
        value, tangent = parts
        if tangent is None:
            return self._from_parts(self._value / value, self._tangent / value)
        return self._from_parts(
            self._value / value,
            (self._tangent * value - self._value * tangent) / (value * value),
        )

    def __rtruediv__(self, other):
        other = _unbox(other)
        if not is_plain_number(other):
            return NotImplemented
        v = self._value
        return self._from_parts(other / v, -other * self._tangent / (v * v))

    def __neg__(self):
        return self._from_parts(-self._value, -self._tangent)

    def __pos__(self):
        return self

    def __abs__(self):
        if isinstance(self._value, Complex) and not isinstance(self._value, Real):
            raise UnsupportedOperationError(
                f"abs() of a {type(self).__name__} with complex value {self._value!r} "
                "is not complex-differentiable."
            )
        # |x| has no derivative at 0; the tangent is taken as zero there.
        if self._value < 0:
            return -self
        if self._value > 0:
            return self
        return self._from_parts(abs(self._value), self._tangent * 0)

    def __pow__(self, exponent):
        exponent = _unbox(exponent)
        if isinstance(exponent, DualBase):
            if type(exponent) is not type(self):
                return NotImplemented
            self._check_compatible(exponent)
            from dualkit.dual.elementary import exp, log

            return exp(exponent * log(self))
        if isinstance(exponent, (int, np.integer)):
            return self._integer_power(int(exponent))
        if is_plain_number(exponent):
            v = self._value
            if exponent == 0:
                return self._from_parts(v ** exponent, self._tangent * 0)
            # np.power gives inf for a zero base with exponent < 1, like np.sqrt.
            return self._from_parts(
                np.power(v, exponent),
                exponent * np.power(v, exponent - 1) * self._tangent,
            )
        return NotImplemented

    def __rpow__(self, base):
        base = _unbox(base)
        if not is_plain_number(base):
            return NotImplemented
        out = base ** self._value
        if base == 0 and isinstance(self._value, Real) and self._value > 0:
            # 0 ** x is flat for x > 0; log(0) would turn the tangent into nan.
            return self._from_parts(out, self._tangent * 0)
        return self._from_parts(out, out * np.log(base) * self._tangent)

    def _integer_power(self, n: int) -> DualBase:
        result = power_by_squaring(self, abs(n), one=self._one())
        return result if n >= 0 else 1 / result

    def __float__(self):
        raise UnsupportedOperationError(
            f"cannot convert {type(self).__name__} to float without dropping its "
            "derivative; use the dualkit/numpy elementary functions instead of "
            "`math`, or read `.value` explicitly."
        )

    def __int__(self):
        raise UnsupportedOperationError(
            f"cannot convert {type(self).__name__} to int without dropping its derivative."
        )

    def __complex__(self):
        raise UnsupportedOperationError(
            f"cannot convert {type(self).__name__} to complex without dropping its derivative."
        )

    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        if method != "__call__" or kwargs:
            return NotImplemented
        if any(isinstance(x, np.ndarray) and x.ndim > 0 for x in inputs):
            return _apply_elementwise(ufunc, inputs)
        return _apply_scalar(ufunc, inputs)

    def __getattr__(self, name: str):
        # NumPy's object-dtype loops call e.g. ``element.sin()``.
        if name.startswith("_"):
            raise AttributeError(name)
        from dualkit.dual.elementary import find_elementary

        lifted = find_elementary(name)
        if lifted is None:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            )
        return partial(lifted, self)
