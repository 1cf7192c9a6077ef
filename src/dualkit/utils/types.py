"""Shared typing aliases for dualkit."""

from __future__ import annotations

from typing import Any, Callable, TypeAlias

import numpy as np
from numpy.typing import NDArray

FloatArray: TypeAlias = NDArray[np.float64]

ScalarFunction: TypeAlias = Callable[[Any], Any]
VectorFunction: TypeAlias = Callable[[NDArray[np.object_]], Any]
LinearSolver: TypeAlias = Callable[[FloatArray, FloatArray], FloatArray]
