"""Provides the CalculusKit class.

A light wrapper around the calculus and solver helpers that exposes a simple
API for partial derivatives, gradients, Jacobians and Newton root finding at
a fixed expansion point.

Typical usage examples:

>>> import numpy as np
>>> from dualkit.calculus_kit import CalculusKit  # noqa: F401
>>>
>>> def sin_function(x):
...     # scalar-valued function: f(θ) = sin(θ0)
...     return np.sin(x[0])
>>>
>>> def circle_diagonal(x):
...     # vector-valued function with a root at (√2/2, √2/2)
...     return [x[0] ** 2 + x[1] ** 2 - 1, x[0] - x[1]]
>>>
>>> grad = CalculusKit(sin_function, x0=np.array([0.5])).gradient()
>>> jac = CalculusKit(circle_diagonal, x0=np.array([3.0, 3.0])).jacobian()
>>> root = CalculusKit(circle_diagonal, x0=np.array([3.0, 3.0])).newton()
"""

from collections.abc import Callable
from typing import Any, Sequence

import numpy as np
from numpy.typing import NDArray

from .calculus import build_gradient, build_jacobian, partial_derivative
from .solvers import NewtonConfig, NewtonResult, newton, newton_tol


class CalculusKit:
    """Provides access to partial derivatives, gradients, Jacobians and roots."""

    def __init__(
        self,
        function: Callable[[NDArray[np.object_]], Any],
        x0: Sequence[float] | np.ndarray,
    ):
        """Initialise with function and expansion point.

        Args:
            function: Maps parameters -> observable(s). Accepts a 1D array-like of length P
                      whose entries are dual numbers during differentiation.
                      Returns either a scalar (for gradient / partial derivatives)
                      or a 1D sequence (for Jacobian and Newton).
            x0: Point at which to evaluate derivatives, or starting point
                for Newton (shape (P,)).
        """
        self.function = function
        self.x0 = np.asarray(x0, dtype=float)

    def partial_derivative(self, index: int) -> Any:
        """Returns the partial derivative of a scalar-valued function along ``index``."""
        return partial_derivative(self.function, self.x0, index)

    def gradient(self) -> NDArray[np.floating]:
        """Returns the gradient of a scalar-valued function."""
        return build_gradient(self.function, self.x0)

    def jacobian(self) -> NDArray[np.floating]:
        """Returns the Jacobian of a vector-valued function."""
        return build_jacobian(self.function, self.x0)

    def newton(self, max_steps: int = 10) -> NDArray[np.floating]:
        """Returns the iterate after ``max_steps`` Newton steps from ``x0``."""
        return newton(self.function, self.x0, max_steps)

    def newton_tol(self, config: NewtonConfig | None = None) -> NewtonResult:
        """Runs Newton from ``x0`` until the residual meets ``config.tol``."""
        return newton_tol(self.function, self.x0, config=config)
