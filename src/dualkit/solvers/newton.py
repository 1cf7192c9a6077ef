"""Newton-Raphson root finding for vector functions.

Each step evaluates ``f`` once at MultiDual-seeded inputs, which yields both
``f(x)`` and the Jacobian ``J(x)``, solves ``J d = f(x)`` and moves to
``x - d``.

Two drivers are provided:

* :func:`newton` runs a fixed number of steps (10 by default) with no
  convergence or divergence test, and returns the last iterate.
* :func:`newton_tol` stops once the residual ``max_i |f_i(x)|`` drops below
  a tolerance and reports how the run ended in a :class:`NewtonResult`.

A singular or ill-conditioned Jacobian raises
:class:`~dualkit.errors.SingularMatrixError` from either driver; the run is
abandoned, not retried.

Example:
    >>> import numpy as np
    >>> from dualkit.solvers.newton import newton
    >>> def circle_diagonal(v):
    ...     x, y = v
    ...     return [x**2 + y**2 - 1, x - y]
    >>> newton(circle_diagonal, [3.0, 3.0])  # doctest: +SKIP
    array([0.70710678, 0.70710678])
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import partial

import numpy as np
from numpy.typing import ArrayLike, NDArray

from dualkit.calculus.jacobian import value_and_jacobian
from dualkit.logger import dualkit_logger
from dualkit.solvers.newton_config import NewtonConfig
from dualkit.utils.linalg import solve_linear
from dualkit.utils.types import LinearSolver, VectorFunction
from dualkit.utils.validate import as_point, check_square_system, validate_step_count

__all__ = [
    "NewtonStatus",
    "NewtonResult",
    "newton_step",
    "newton",
    "newton_tol",
]


class NewtonStatus(Enum):
    """State of a tolerance-based Newton run."""

    RUNNING = "running"
    CONVERGED = "converged"
    FAILED = "failed"


@dataclass(frozen=True)
class NewtonResult:
    """Outcome of :func:`newton_tol`.

    Attributes:
        x: Last iterate.
        status: ``CONVERGED`` or ``FAILED``.
        n_steps: Number of Newton steps taken.
        residual: ``max_i |f_i(x)|`` at the last iterate.
    """

    x: NDArray[np.float64]
    status: NewtonStatus
    n_steps: int
    residual: float

    @property
    def converged(self) -> bool:
        """True if the residual reached the tolerance."""
        return self.status is NewtonStatus.CONVERGED


def _evaluate(
    function: VectorFunction,
    x: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    # Non-finite iterates are left to the caller (newton_tol) or the solve.
    fx, jac = value_and_jacobian(function, x, check_finite=False)
    check_square_system(fx, x)
    return fx, jac


def newton_step(
    function: VectorFunction,
    x: ArrayLike,
    *,
    solver: LinearSolver = solve_linear,
) -> NDArray[np.float64]:
    """Takes one Newton step for ``function(x) = 0``.

    Args:
        function: Map from R^n to R^n, written with dual-supported operations.
        x: Current iterate.
        solver: Callable solving ``matrix @ d = vector`` for ``d``.

    Returns:
        The next iterate ``x - d`` with ``J(x) d = f(x)``.

    Raises:
        ValueError: If ``x`` is empty or the system is not square.
        SingularMatrixError: If the Jacobian has no unique inverse.
    """
    point = as_point(x, name="x")
    fx, jac = _evaluate(function, point)
    delta = np.asarray(solver(jac, fx), dtype=float).reshape(point.shape)
    return point - delta


def newton(
    function: VectorFunction,
    x0: ArrayLike,
    max_steps: int = 10,
    *,
    solver: LinearSolver = solve_linear,
) -> NDArray[np.float64]:
    """Runs a fixed number of Newton steps.

    Exactly ``max_steps`` steps are taken unconditionally: there is no
    residual test and no divergence detection. Use :func:`newton_tol` for a
    tolerance-based stopping rule.

    Args:
        function: Map from R^n to R^n, written with dual-supported operations.
        x0: Starting point.
        max_steps: Number of steps to take.
        solver: Callable solving ``matrix @ d = vector`` for ``d``.

    Returns:
        The final iterate.

    Raises:
        ValueError: If ``x0`` is empty, ``max_steps`` is negative, or the
            system is not square.
        SingularMatrixError: If a Jacobian along the way has no unique inverse.
    """
    n_steps = validate_step_count(max_steps)
    x = as_point(x0)
    for step in range(n_steps):
        x = newton_step(function, x, solver=solver)
        dualkit_logger.debug("newton: step %d/%d, x=%s", step + 1, n_steps, x)
    return x


def newton_tol(
    function: VectorFunction,
    x0: ArrayLike,
    *,
    config: NewtonConfig | None = None,
    solver: LinearSolver | None = None,
) -> NewtonResult:
    """Runs Newton's method until the residual drops below a tolerance.

    Before every step the residual ``max_i |f_i(x)|`` is compared with
    ``config.tol``. The run ends as

    * ``CONVERGED`` once the residual is at or below the tolerance;
    * ``FAILED`` if the residual is non-finite or ``config.max_steps`` steps
      have been taken without converging (a warning is logged).

    Args:
        function: Map from R^n to R^n, written with dual-supported operations.
        x0: Starting point.
        config: Stopping and conditioning settings. Defaults to
            ``NewtonConfig()``.
        solver: Callable solving ``matrix @ d = vector`` for ``d``. Defaults
            to :func:`~dualkit.utils.linalg.solve_linear` with
            ``config.cond_limit``.

    Returns:
        A :class:`NewtonResult`.

    Raises:
        ValueError: If ``x0`` is empty or the system is not square.
        SingularMatrixError: If a Jacobian along the way has no unique inverse.
    """
    config = config or NewtonConfig()
    solve = solver or partial(solve_linear, cond_limit=config.cond_limit)

    x = as_point(x0)
    status = NewtonStatus.RUNNING
    n_steps = 0
    residual = np.inf
    while status is NewtonStatus.RUNNING:
        fx, jac = _evaluate(function, x)
        residual = float(np.max(np.abs(fx))) if fx.size else 0.0
        dualkit_logger.debug("newton_tol: step %d, residual=%.3e", n_steps, residual)

        if not np.isfinite(residual):
            status = NewtonStatus.FAILED
        elif residual <= config.tol:
            status = NewtonStatus.CONVERGED
        elif n_steps >= config.max_steps:
            status = NewtonStatus.FAILED
        else:
            delta = np.asarray(solve(jac, fx), dtype=float).reshape(x.shape)
            x = x - delta
            n_steps += 1

    if status is NewtonStatus.FAILED:
        dualkit_logger.warning(
            "newton_tol did not converge after %d steps (residual=%.3e, tol=%.3e).",
            n_steps,
            residual,
            config.tol,
        )
    return NewtonResult(x=x, status=status, n_steps=n_steps, residual=residual)
