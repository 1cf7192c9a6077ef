"""Calculus utilities.

Provides derivative, gradient, and Jacobian extraction from dual-number
evaluations.
"""

from .derivative import derivative, partial_derivative
from .gradient import build_gradient, value_and_gradient
from .jacobian import build_jacobian, value_and_jacobian

__all__ = [
    "derivative",
    "partial_derivative",
    "build_gradient",
    "value_and_gradient",
    "build_jacobian",
    "value_and_jacobian",
]
