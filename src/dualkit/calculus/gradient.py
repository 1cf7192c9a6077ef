"""Contains functions used to construct the gradient of scalar-valued functions."""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from dualkit.dual.base import _unbox
from dualkit.dual.multidual import MultiDual, seed_vector
from dualkit.errors import DimensionMismatchError
from dualkit.utils.types import VectorFunction
from dualkit.utils.validate import as_point, is_plain_number

__all__ = ["build_gradient", "value_and_gradient"]


def build_gradient(
    function: VectorFunction,
    x0: ArrayLike,
) -> NDArray[np.floating]:
    """Returns the gradient of a scalar-valued function.

    Every component of ``x0`` is seeded as a one-hot MultiDual and
    ``function`` is evaluated exactly once, whatever the dimension.

    Args:
        function: The function to be differentiated. It receives a 1D object
            array of MultiDuals and must return a scalar.
        x0: The parameter vector at which the gradient is evaluated.

    Returns:
        A 1D array representing the gradient.

    Raises:
        ValueError: If ``x0`` is empty.
        TypeError: If ``function`` does not return a scalar value.
        FloatingPointError: If non-finite values are encountered.
    """
    _, grad = value_and_gradient(function, x0)
    return grad


def value_and_gradient(
    function: VectorFunction,
    x0: ArrayLike,
) -> tuple[Any, NDArray[np.floating]]:
    """Returns the value and the gradient of a scalar-valued function.

    Both come from the same single evaluation of ``function``.

    Args:
        function: The function to be differentiated.
        x0: The parameter vector at which the gradient is evaluated.

    Returns:
        A tuple ``(value, gradient)``.

    Raises:
        ValueError: If ``x0`` is empty.
        TypeError: If ``function`` does not return a scalar value.
        FloatingPointError: If non-finite values are encountered.
    """
    theta = as_point(x0)
    n = theta.size
    out = _scalar_output(function(seed_vector(theta)))

    if isinstance(out, MultiDual):
        if out.n != n:
            raise DimensionMismatchError(
                f"build_gradient: output carries {out.n} partials; expected {n}."
            )
        value = out.value
        grad = np.array(out.partials, dtype=float)
    elif is_plain_number(out):
        value = out
        grad = np.zeros(n, dtype=float)
    else:
        raise TypeError(
            "build_gradient() expects the function to return a MultiDual or a "
            f"plain number; got {type(out).__name__}."
        )

    if not np.isfinite(grad).all():
        raise FloatingPointError("Non-finite values encountered in build_gradient.")
    return value, grad


def _scalar_output(out: Any) -> Any:
    """Unwraps a scalar output, rejecting vector outputs."""
    if isinstance(out, (list, tuple)):
        out = np.asarray(out, dtype=object)
    if isinstance(out, np.ndarray):
        if out.size != 1:
            raise TypeError(
                "build_gradient() expects a scalar-valued function; "
                f"got shape {out.shape}."
            )
        return _unbox(out.reshape(-1)[0])
    return out
