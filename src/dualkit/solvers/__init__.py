"""Root finding on top of the Jacobian extractor."""

from .newton import NewtonResult, NewtonStatus, newton, newton_step, newton_tol
from .newton_config import NewtonConfig

__all__ = [
    "NewtonConfig",
    "NewtonResult",
    "NewtonStatus",
    "newton_step",
    "newton",
    "newton_tol",
]
