"""Contains functions used to compute derivatives of single-variable functions."""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike

from dualkit.dual.base import DualBase, _unbox
from dualkit.dual.dual import Dual
from dualkit.utils.sandbox import get_partial_function
from dualkit.utils.types import ScalarFunction, VectorFunction
from dualkit.utils.validate import as_point, is_plain_number

__all__ = ["derivative", "partial_derivative"]


def derivative(function: ScalarFunction, x0: Any) -> Any:
    """Returns the derivative of ``function`` at ``x0``.

    The function is evaluated once at ``Dual(x0, 1)`` and the derivative is
    read off the result. ``function`` must be built from operations that
    have a dual rule (arithmetic, integer and real powers, the registered
    elementary functions); anything else raises as soon as it is reached.

    The number type of ``x0`` is kept, so an exact input such as a
    :class:`fractions.Fraction` gives an exact derivative for rational
    functions.

    Args:
        function: Function of one variable returning a scalar, or a list or
            array of scalars.
        x0: Point at which to evaluate the derivative.

    Returns:
        The derivative. Vector-valued functions give an array of the same
        shape as the output. Outputs that do not depend on the input have
        derivative zero.

    Raises:
        TypeError: If ``x0`` is not a plain number or the function returns
            something other than duals and numbers.
    """
    x0 = _unbox(x0)
    if isinstance(x0, DualBase):
        raise TypeError(
            "derivative() expects a plain number for x0; nested duals "
            "(higher-order derivatives) are not supported."
        )
    if not is_plain_number(x0):
        raise TypeError(
            f"derivative() expects a scalar x0; got {type(x0).__name__}. "
            "Use build_gradient or build_jacobian for vector inputs."
        )

    out = function(Dual.variable(x0))

    if isinstance(out, (list, tuple, np.ndarray)):
        arr = np.asarray(out, dtype=object)
        if arr.ndim > 0:
            derivs = [_component_derivative(o, x0) for o in arr.ravel()]
            return np.asarray(derivs).reshape(arr.shape)
    return _component_derivative(out, x0)


def _component_derivative(out: Any, x0: Any) -> Any:
    """Reads the derivative off a single output component."""
    out = _unbox(out)
    if isinstance(out, Dual):
        return out.derivative
    if is_plain_number(out):
        return x0 * 0
    raise TypeError(
        "derivative() expects the function to return Duals or plain numbers; "
        f"got {type(out).__name__}."
    )


def partial_derivative(
    function: VectorFunction,
    x0: ArrayLike,
    index: int,
) -> Any:
    """Returns the partial derivative of ``function`` along one axis.

    All components of ``x0`` except ``index`` are held fixed, and the
    resulting single-variable function is differentiated with
    :func:`derivative`. ``build_gradient`` gives all partials in a single
    evaluation; this helper needs one evaluation per axis.

    Args:
        function: Function of a parameter vector.
        x0: Point at which to evaluate the partial derivative.
        index: Zero-based axis to differentiate along.

    Returns:
        The partial derivative.

    Raises:
        ValueError: If ``x0`` is empty.
        IndexError: If ``index`` is out of bounds.
    """
    point = as_point(x0)
    f_i = get_partial_function(function, index, point)
    return derivative(f_i, float(point[index]))
