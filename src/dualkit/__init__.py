"""Provides all dualkit methods."""

from importlib.metadata import PackageNotFoundError, version

from dualkit.calculus import (
    build_gradient,
    build_jacobian,
    derivative,
    partial_derivative,
    value_and_gradient,
    value_and_jacobian,
)
from dualkit.calculus_kit import CalculusKit
from dualkit.dual import (
    Dual,
    MultiDual,
    available_elementary,
    get_elementary,
    lift,
    power_by_squaring,
    register_elementary,
    seed_vector,
)
from dualkit.dual import elementary
from dualkit.errors import (
    DimensionMismatchError,
    SingularMatrixError,
    UnsupportedOperationError,
)
from dualkit.solvers import (
    NewtonConfig,
    NewtonResult,
    NewtonStatus,
    newton,
    newton_step,
    newton_tol,
)
from dualkit.utils.linalg import solve_linear

try:
    __version__ = version("dualkit")
except PackageNotFoundError:
    pass

__all__ = [
    "Dual",
    "MultiDual",
    "seed_vector",
    "power_by_squaring",
    "lift",
    "register_elementary",
    "get_elementary",
    "available_elementary",
    "elementary",
    "derivative",
    "partial_derivative",
    "build_gradient",
    "build_jacobian",
    "value_and_gradient",
    "value_and_jacobian",
    "newton_step",
    "newton",
    "newton_tol",
    "NewtonConfig",
    "NewtonResult",
    "NewtonStatus",
    "solve_linear",
    "CalculusKit",
    "DimensionMismatchError",
    "UnsupportedOperationError",
    "SingularMatrixError",
]
