"""Dense linear solve used by the Newton solver."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from dualkit.errors import SingularMatrixError

__all__ = [
    "default_cond_limit",
    "solve_linear",
]


def default_cond_limit() -> float:
    """Returns the default condition-number limit ``1 / eps`` for float64."""
    return 1.0 / float(np.finfo(float).eps)


def solve_linear(
    matrix: ArrayLike,
    vector: ArrayLike,
    *,
    cond_limit: float | None = None,
) -> NDArray[np.float64]:
    """Solve ``matrix @ x = vector`` for ``x``.

    Unlike a least-squares or pseudoinverse solve, this never returns an
    answer for a system without a unique solution. Exactly singular
    matrices and matrices whose condition number exceeds ``cond_limit``
    raise :class:`~dualkit.errors.SingularMatrixError`.

    Args:
      matrix: Coefficient matrix of shape ``(n, n)``.
      vector: Right-hand side vector or matrix of shape ``(n,)`` or ``(n, k)``.
      cond_limit: Largest accepted 2-norm condition number. Defaults to
          ``1 / eps`` for float64.

    Returns:
      Solution array ``x`` with shape matching ``vector`` (``(n,)`` or ``(n, k)``).

    Raises:
      ValueError: If shapes of ``matrix`` and ``vector`` are incompatible,
          or either contains non-finite values.
      SingularMatrixError: If ``matrix`` is singular or ill-conditioned.
    """
    matrix = np.asarray(matrix, dtype=float)
    vector = np.asarray(vector, dtype=float)

    # Shape checks
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1] or matrix.shape[0] == 0:
        raise ValueError(f"matrix must be square 2D and non-empty; got shape {matrix.shape}.")
    n = matrix.shape[0]
    if vector.ndim not in (1, 2) or vector.shape[0] != n:
        raise ValueError(f"vector must have shape (n,) or (n,k) with n={n}; got {vector.shape}.")
    if not np.all(np.isfinite(matrix)):
        raise ValueError("matrix contains non-finite values.")
    if not np.all(np.isfinite(vector)):
        raise ValueError("vector contains non-finite values.")

    limit = default_cond_limit() if cond_limit is None else float(cond_limit)

    cond_val = np.linalg.cond(matrix)
    if not np.isfinite(cond_val) or cond_val > limit:
        raise SingularMatrixError(
            f"matrix is singular or ill-conditioned (cond≈{cond_val:.2e}, "
            f"limit {limit:.2e}); the system has no unique solution."
        )

    try:
        return np.linalg.solve(matrix, vector)
    except np.linalg.LinAlgError as exc:
        raise SingularMatrixError("matrix is singular; the system has no unique solution.") from exc
