"""Unit tests for dualkit.utils.sandbox."""

import numpy as np
import pytest

from dualkit.dual.dual import Dual
from dualkit.utils.sandbox import get_partial_function


def test_partial_function_substitutes_one_entry():
    """Only the chosen entry varies."""
    seen = []

    def full(params):
        seen.append(list(params))
        return params[0] + 10 * params[1]

    f = get_partial_function(full, 1, [1.0, 2.0])
    assert f(5.0) == 51.0
    assert seen == [[1.0, 5.0]]


def test_partial_function_accepts_duals():
    """The varied entry may be a dual number."""
    f = get_partial_function(lambda p: p[0] * p[1], 0, [1.0, 3.0])
    assert f(Dual(2.0, 1.0)) == Dual(6.0, 3.0)


def test_fixed_values_not_modified():
    """The caller's values are copied."""
    fixed = np.array([1.0, 2.0])
    get_partial_function(lambda p: p[0], 0, fixed)(Dual(5.0, 1.0))
    np.testing.assert_array_equal(fixed, [1.0, 2.0])


def test_partial_function_validation():
    """Bad inputs raise the documented errors."""
    with pytest.raises(ValueError):
        get_partial_function(sum, 0, [[1.0, 2.0]])
    with pytest.raises(TypeError):
        get_partial_function(sum, 1.0, [1.0, 2.0])
    with pytest.raises(IndexError):
        get_partial_function(sum, 2, [1.0, 2.0])
    with pytest.raises(IndexError):
        get_partial_function(sum, -1, [1.0, 2.0])

