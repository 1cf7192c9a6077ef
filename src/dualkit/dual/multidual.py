"""Provides :class:`MultiDual`, a dual number with a vector of partials.

A ``MultiDual`` carries a value and ``n`` partial derivatives. Seeding each of
the ``n`` inputs of a function with a one-hot partials vector and evaluating
the function once gives the full gradient in the partials of the result; see
:func:`seed_vector` and :mod:`dualkit.calculus`.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from dualkit.dual.base import DualBase, _unbox
from dualkit.errors import DimensionMismatchError
from dualkit.utils.validate import is_plain_number

__all__ = ["MultiDual", "seed_vector"]


def _check_dimension(n: Any) -> int:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise TypeError(f"n must be an integer; got {type(n).__name__}.")
    if n < 1:
        raise ValueError(f"n must be >= 1; got {n}.")
    return int(n)


class MultiDual(DualBase):
    """Value and ``n`` partial derivatives of a function at a point.

    Arithmetic mirrors :class:`~dualkit.dual.dual.Dual` with the derivative
    replaced by the partials vector, e.g. the product rule becomes
    ``partials[k] = f.value * g.partials[k] + g.value * f.partials[k]``
    for every ``k``.

    Combining two MultiDuals with different ``n`` raises
    :class:`~dualkit.errors.DimensionMismatchError`.

    Attributes:
        value: Function value at the evaluation point.
        partials: Read-only 1D array of the ``n`` partial derivatives.
        n: Number of partial derivatives.
    """

    __slots__ = ()

    def __init__(self, value: Any, partials: Sequence[Any] | NDArray):
        """Initialises a MultiDual.

        Args:
            value: Function value at the evaluation point.
            partials: Non-empty 1D sequence of partial derivatives. It is
                copied, so later changes to the input do not leak in.

        Raises:
            TypeError: If ``value`` is not a plain number.
            ValueError: If ``partials`` is not a non-empty 1D sequence.
        """
        value = _unbox(value)
        if not is_plain_number(value):
            raise TypeError(
                f"MultiDual value must be a plain number; got {type(value).__name__}."
            )
        arr = np.array(partials)
        if arr.ndim != 1 or arr.size == 0:
            raise ValueError(f"partials must be a non-empty 1D sequence; got shape {arr.shape}.")
        if arr.dtype == object and not all(is_plain_number(p) for p in arr):
            raise TypeError("partials must contain plain numbers only.")
        arr.setflags(write=False)
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_tangent", arr)

    @classmethod
    def _from_parts(cls, value: Any, tangent: Any) -> MultiDual:
        if isinstance(tangent, np.ndarray) and tangent.flags.writeable:
            tangent.setflags(write=False)
        return super()._from_parts(value, tangent)

    @classmethod
    def seed(cls, value: Any, index: int, n: int, *, dtype: Any = float) -> MultiDual:
        """Seeds input ``index`` of an ``n``-variable function.

        The partials are one-hot: ``1`` at ``index`` and ``0`` elsewhere, i.e.
        the identity function along that axis.

        Args:
            value: Value of the input variable.
            index: Zero-based axis of the variable.
            n: Total number of variables.
            dtype: dtype of the partials vector. Use ``object`` to keep exact
                number types such as :class:`fractions.Fraction`.

        Returns:
            The seeded MultiDual.

        Raises:
            IndexError: If ``index`` is outside ``[0, n)``.
        """
        n = _check_dimension(n)
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise TypeError(f"index must be an integer; got {type(index).__name__}.")
        if index < 0 or index >= n:
            raise IndexError(f"index {index} out of bounds for n={n}.")
        partials = np.zeros(n, dtype=dtype)
        partials[index] = 1
        return cls(value, partials)

    @classmethod
    def constant(cls, value: Any, n: int) -> MultiDual:
        """Wraps ``value`` as a constant with ``n`` zero partials."""
        return cls(value, np.zeros(_check_dimension(n)))

    @property
    def partials(self) -> NDArray:
        """Read-only 1D array of partial derivatives."""
        return self._tangent

    @property
    def n(self) -> int:
        """Number of partial derivatives."""
        return int(self._tangent.size)

    def _check_compatible(self, other: DualBase) -> None:
        if other._tangent.shape != self._tangent.shape:
            raise DimensionMismatchError(
                f"cannot combine MultiDual operands with n={self.n} and n={other._tangent.size}."
            )

    def __repr__(self) -> str:
        return f"MultiDual({self._value!r}, {self._tangent.tolist()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiDual):
            return NotImplemented
        return bool(
            self._value == other._value
            and self._tangent.shape == other._tangent.shape
            and np.array_equal(self._tangent, other._tangent)
        )

    def __hash__(self) -> int:
        return hash((self._value, tuple(self._tangent.tolist())))


def seed_vector(values: ArrayLike) -> NDArray[np.object_]:
    """Seeds every component of a point as an independent variable.

    Component ``i`` becomes ``MultiDual.seed(values[i], i, n)``. The result is
    a 1D object array, so a target function can unpack it, index it or pass
    it to NumPy ufuncs just like a float parameter vector.

    Args:
        values: Non-empty 1D point (flattened if needed).

    Returns:
        1D object array of ``n`` seeded MultiDuals.

    Raises:
        ValueError: If ``values`` is empty.
    """
    arr = np.asarray(values).ravel()
    if arr.size == 0:
        raise ValueError("values must be a non-empty 1D array.")
    n = arr.size
    dtype = object if arr.dtype == object else float
    seeds = np.empty(n, dtype=object)
    for i, v in enumerate(arr.tolist()):
        seeds[i] = MultiDual.seed(v, i, n, dtype=dtype)
    return seeds
