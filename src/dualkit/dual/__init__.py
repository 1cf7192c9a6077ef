"""Dual-number types.

Provides the scalar :class:`Dual`, the multivariate :class:`MultiDual`, the
generic :func:`power_by_squaring` they use for integer powers, and the
elementary-function lifting protocol.
"""

from .dual import Dual
from .elementary import (
    available_elementary,
    get_elementary,
    lift,
    register_elementary,
)
from .multidual import MultiDual, seed_vector
from .power import power_by_squaring

__all__ = [
    "Dual",
    "MultiDual",
    "seed_vector",
    "power_by_squaring",
    "lift",
    "register_elementary",
    "get_elementary",
    "available_elementary",
]
