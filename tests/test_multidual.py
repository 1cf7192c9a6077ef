"""Unit tests for dualkit.dual.multidual."""

from fractions import Fraction

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from dualkit.dual.multidual import MultiDual, seed_vector
from dualkit.errors import DimensionMismatchError, UnsupportedOperationError


def test_seed_is_one_hot():
    """A seed has a one at its axis and zeros elsewhere."""
    s = MultiDual.seed(2.5, 1, 3)
    assert s.value == 2.5
    assert s.n == 3
    assert_array_equal(s.partials, [0.0, 1.0, 0.0])


@pytest.mark.parametrize("index, n, exc", [
    (3, 3, IndexError),
    (-1, 3, IndexError),
    (0, 0, ValueError),
    (0.0, 2, TypeError),
])
def test_seed_rejects_bad_axes(index, n, exc):
    """Out-of-range axes and dimensions are rejected."""
    with pytest.raises(exc):
        MultiDual.seed(1.0, index, n)


def test_constant_has_zero_partials():
    """constant() builds a MultiDual with n zero partials."""
    c = MultiDual.constant(4.0, 2)
    assert_array_equal(c.partials, [0.0, 0.0])


def test_elementwise_sum_and_product_rules():
    """Sum and product rules hold independently on every axis."""
    f = MultiDual(2.0, [1.0, 0.0, 3.0])
    g = MultiDual(5.0, [0.0, 1.0, 2.0])

    total = f + g
    assert total.value == 7.0
    assert_array_equal(total.partials, [1.0, 1.0, 5.0])

    prod = f * g
    assert prod.value == 10.0
    assert_array_equal(prod.partials, [5.0, 2.0, 19.0])


def test_scalar_constants_broadcast():
    """Plain numbers act as constants on every axis."""
    f = MultiDual(2.0, [1.0, -1.0])
    assert (3.0 * f) == MultiDual(6.0, [3.0, -3.0])
    assert (f + 1.0) == MultiDual(3.0, [1.0, -1.0])
    assert (1.0 - f) == MultiDual(-1.0, [-1.0, 1.0])
    assert (f / 2.0) == MultiDual(1.0, [0.5, -0.5])


@pytest.mark.parametrize("op", [
    lambda a, b: a + b,
    lambda a, b: a - b,
    lambda a, b: a * b,
    lambda a, b: a / b,
    lambda a, b: a ** b,
])
def test_dimension_mismatch_always_raises(op):
    """Operands with n=2 and n=3 never produce a result."""
    a = MultiDual(1.5, [1.0, 0.0])
    b = MultiDual(2.0, [0.0, 1.0, 0.0])
    with pytest.raises(DimensionMismatchError):
        op(a, b)
    with pytest.raises(DimensionMismatchError):
        op(b, a)


def test_partials_are_read_only_copies():
    """Partials are copied on construction and cannot be written."""
    source = np.array([1.0, 2.0])
    f = MultiDual(0.0, source)
    source[0] = 99.0
    assert_array_equal(f.partials, [1.0, 2.0])
    with pytest.raises(ValueError):
        f.partials[0] = 5.0
    with pytest.raises(ValueError):
        (f * 2.0).partials[0] = 5.0


def test_partials_must_be_non_empty_1d():
    """Scalars, empty and nested partials are rejected."""
    with pytest.raises(ValueError):
        MultiDual(1.0, [])
    with pytest.raises(ValueError):
        MultiDual(1.0, [[1.0, 0.0]])
    with pytest.raises(ValueError):
        MultiDual(1.0, 1.0)


def test_seed_vector_seeds_every_component():
    """seed_vector returns an object array of one-hot seeds."""
    seeds = seed_vector([0.5, -1.0, 2.0])
    assert seeds.dtype == object
    assert seeds.shape == (3,)
    for i, s in enumerate(seeds):
        assert s.value == [0.5, -1.0, 2.0][i]
        assert_array_equal(s.partials, np.eye(3)[i])


def test_seed_vector_rejects_empty_input():
    """An empty point cannot be seeded."""
    with pytest.raises(ValueError):
        seed_vector([])


def test_fraction_seeds_stay_exact():
    """Object-dtype points keep exact partials."""
    x, y = seed_vector([Fraction(1, 2), Fraction(1, 3)])
    out = x * y + x * x
    assert out.value == Fraction(1, 6) + Fraction(1, 4)
    assert out.partials.tolist() == [Fraction(4, 3), Fraction(1, 2)]


def test_numpy_ufuncs_on_multiduals():
    """np.sin on a MultiDual and on an array of MultiDuals applies the chain rule."""
    x, y = seed_vector([0.3, 1.2])
    s = np.sin(x * y)
    assert_allclose(s.value, np.sin(0.36))
    assert_allclose(s.partials, np.cos(0.36) * np.array([1.2, 0.3]))

    arr = np.sin(seed_vector([0.3, 1.2]))
    assert arr.dtype == object
    assert_allclose(arr[0].partials, [np.cos(0.3), 0.0])
    assert_allclose(arr[1].partials, [0.0, np.cos(1.2)])


def test_numpy_reductions_over_multiduals():
    """np.sum and np.dot combine lists of MultiDuals with the dual rules."""
    x, y = seed_vector([2.0, 3.0])
    total = np.sum([x, y, x])
    assert total == MultiDual(7.0, [2.0, 1.0])

    weighted = np.dot(np.array([1.0, -2.0]), np.array([x, y], dtype=object))
    assert weighted == MultiDual(-4.0, [1.0, -2.0])


def test_unregistered_ufunc_is_unsupported():
    """A ufunc without a dual rule raises UnsupportedOperationError."""
    x, y = seed_vector([0.3, 1.2])
    with pytest.raises(UnsupportedOperationError):
        np.floor(x)
    with pytest.raises(UnsupportedOperationError):
        np.arctan2(x, y)


def test_equality_and_hash():
    """MultiDuals compare by value and partials."""
    a = MultiDual(1.0, [1.0, 2.0])
    assert a == MultiDual(1.0, [1.0, 2.0])
    assert a != MultiDual(1.0, [1.0, 2.0, 0.0])
    assert a != MultiDual(1.0, [1.0, 3.0])
    assert hash(a) == hash(MultiDual(1.0, [1.0, 2.0]))


def test_repr_lists_partials():
    """repr shows the value and the partials as a list."""
    assert repr(MultiDual(1.0, [0.0, 1.0])) == "MultiDual(1.0, [0.0, 1.0])"
