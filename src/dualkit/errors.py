"""Exception types raised by dualkit.

The classes subclass the builtin (or numpy) exception that a caller would
catch for the same kind of problem, so generic handlers keep working.
"""

from __future__ import annotations

import numpy as np

__all__ = [
    "DimensionMismatchError",
    "UnsupportedOperationError",
    "SingularMatrixError",
]


class DimensionMismatchError(ValueError):
    """Raised when two MultiDual operands carry partials of different length."""


class UnsupportedOperationError(TypeError):
    """Raised when an operation has no dual-number rule.

    Typical causes are an unregistered numpy ufunc, an unknown elementary
    function name, or collapsing a dual to a plain ``float`` (which is what
    the ``math`` module functions do).
    """


class SingularMatrixError(np.linalg.LinAlgError):
    """Raised when a linear system has no unique solution.

    This covers exactly singular matrices as well as matrices whose
    condition number exceeds the accepted limit.
    """
