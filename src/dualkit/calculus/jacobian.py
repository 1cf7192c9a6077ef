"""Contains functions used to construct the Jacobian matrix."""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from dualkit.dual.base import _unbox
from dualkit.dual.multidual import MultiDual, seed_vector
from dualkit.errors import DimensionMismatchError
from dualkit.utils.types import VectorFunction
from dualkit.utils.validate import as_point, is_plain_number

__all__ = ["build_jacobian", "value_and_jacobian"]


def build_jacobian(
    function: VectorFunction,
    x0: ArrayLike,
) -> NDArray[np.floating]:
    """Computes the Jacobian of a vector-valued function.

    Row ``i`` holds the partial derivatives of output ``i``; column ``j``
    corresponds to parameter ``j``. The whole ``(m, n)`` matrix comes from a
    single evaluation of ``function``.

    Args:
        function: The vector-valued function to be differentiated.
            It receives a 1D object array of MultiDuals and must return a
            1D list, tuple or array of m components.
        x0: The parameter vector at which the jacobian is evaluated.

    Returns:
        A 2D array of shape ``(m, n)`` representing the jacobian.

    Raises:
        FloatingPointError: If non-finite values are encountered.
        ValueError: If ``x0`` is an empty array.
        TypeError: If ``function`` does not return a vector value.
        DimensionMismatchError: If an output component carries the wrong
            number of partials.
    """
    _, jac = value_and_jacobian(function, x0)
    return jac


def value_and_jacobian(
    function: VectorFunction,
    x0: ArrayLike,
    *,
    check_finite: bool = True,
) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
    """Returns the value and the Jacobian of a vector-valued function.

    Both come from the same single evaluation of ``function``; the Newton
    solver relies on this to get ``f(x)`` and ``J(x)`` together.

    Args:
        function: The vector-valued function to be differentiated.
        x0: The parameter vector at which the jacobian is evaluated.
        check_finite: If True, raise on non-finite Jacobian entries.

    Returns:
        A tuple ``(values, jacobian)`` with shapes ``(m,)`` and ``(m, n)``.

    Raises:
        FloatingPointError: If non-finite values are encountered in the jacobian.
        ValueError: If ``x0`` is an empty array.
        TypeError: If ``function`` does not return a vector value.
        DimensionMismatchError: If an output component carries the wrong
            number of partials.
    """
    theta = as_point(x0)
    n = theta.size
    components = _vector_output(function(seed_vector(theta)))

    m = len(components)
    values = np.empty(m, dtype=float)
    jac = np.zeros((m, n), dtype=float)
    for i, comp in enumerate(components):
        comp = _unbox(comp)
        if isinstance(comp, MultiDual):
            if comp.n != n:
                raise DimensionMismatchError(
                    f"Output component {i} carries {comp.n} partials; expected {n}."
                )
            values[i] = comp.value
            jac[i] = comp.partials
        elif is_plain_number(comp):
            # Constant component: zero row.
            values[i] = comp
        else:
            raise TypeError(
                f"build_jacobian: output component {i} has unsupported type "
                f"{type(comp).__name__}."
            )

    if check_finite and not np.isfinite(jac).all():
        raise FloatingPointError("Non-finite values encountered in build_jacobian.")
    return values, jac


def _vector_output(out: Any) -> list:
    """Splits a 1D vector output into its components."""
    if isinstance(out, (list, tuple)):
        out = np.asarray(out, dtype=object)
    if not isinstance(out, np.ndarray) or out.ndim != 1:
        shape = out.shape if isinstance(out, np.ndarray) else ()
        raise TypeError(
            f"build_jacobian expects f: R^n -> R^m with 1-D vector output; got shape {shape}"
        )
    return list(out)
