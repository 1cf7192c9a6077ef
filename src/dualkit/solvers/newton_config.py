"""Configuration for the tolerance-based Newton solver.

This config controls how :func:`dualkit.solvers.newton.newton_tol` decides
that it has converged, how many steps it may take, and which Jacobians the
linear solve accepts.
"""

from __future__ import annotations

import numpy as np

from dualkit.utils.validate import validate_step_count


class NewtonConfig:
    """Configuration for the tolerance-based Newton solver.

    The fixed-count :func:`~dualkit.solvers.newton.newton` does not use it;
    only :func:`~dualkit.solvers.newton.newton_tol` does.
    """

    def __init__(
        self,
        max_steps: int = 50,
        tol: float = 1e-10,
        cond_limit: float | None = None,
    ):
        """Initialize configuration.

        Args:
            max_steps:
                Maximum number of Newton steps. The residual is checked
                before every step, so ``max_steps=0`` only reports whether
                ``x0`` already is a root.

            tol:
                Convergence threshold on the residual
                ``max_i |f_i(x)|``. The run is marked converged as soon as
                the residual is at or below ``tol``.

            cond_limit:
                Largest Jacobian condition number accepted by the linear
                solve. ``None`` uses ``1 / eps``. Jacobians beyond the
                limit raise :class:`~dualkit.errors.SingularMatrixError`.

        Raises:
            TypeError: If ``max_steps`` is not an integer.
            ValueError: If ``max_steps`` is negative, ``tol`` is negative or
                non-finite, or ``cond_limit`` is not greater than one.
        """
        self.max_steps = validate_step_count(max_steps)

        tol = float(tol)
        if not np.isfinite(tol) or tol < 0.0:
            raise ValueError(f"tol must be finite and >= 0; got {tol}.")
        self.tol = tol

        if cond_limit is not None:
            cond_limit = float(cond_limit)
            if not cond_limit > 1.0:
                raise ValueError(f"cond_limit must be > 1; got {cond_limit}.")
        self.cond_limit = cond_limit

    def __repr__(self) -> str:
        return (
            f"NewtonConfig(max_steps={self.max_steps}, tol={self.tol}, "
            f"cond_limit={self.cond_limit})"
        )
