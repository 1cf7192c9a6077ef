"""Unit tests for dualkit.solvers.newton and newton_config."""

import logging

import numpy as np
import pytest
from numpy.testing import assert_allclose

from dualkit.errors import SingularMatrixError
from dualkit.solvers.newton import NewtonStatus, newton, newton_step, newton_tol
from dualkit.solvers.newton_config import NewtonConfig

ROOT = np.sqrt(2.0) / 2.0


def circle_diagonal(v):
    """Unit circle intersected with the diagonal."""
    x, y = v
    return [x ** 2 + y ** 2 - 1, x - y]


def parallel_lines(v):
    """System whose Jacobian is singular everywhere."""
    x, y = v
    return [x + y, 2 * x + 2 * y]


def test_converges_to_circle_diagonal_root():
    """Ten steps from (3, 3) reach (sqrt(2)/2, sqrt(2)/2)."""
    assert_allclose(newton(circle_diagonal, [3.0, 3.0]), [ROOT, ROOT], rtol=1e-12)


def test_single_step():
    """One step from (3, 3) solves J d = f with J = [[6, 6], [1, -1]]."""
    assert_allclose(newton_step(circle_diagonal, [3.0, 3.0]), [19.0 / 12.0, 19.0 / 12.0])


def test_linear_system_solved_in_one_step():
    """Newton is exact on affine maps."""
    def f(v):
        return [2 * v[0] + v[1] - 5, v[0] - v[1] + 2]

    assert_allclose(newton(f, [10.0, -10.0], 1), [1.0, 3.0])


def test_fixed_step_count(count_calls):
    """newton evaluates the function once per step, with no early exit."""
    f = count_calls(circle_diagonal)
    newton(f, [3.0, 3.0], 7)
    assert f.calls == 7


def test_zero_steps_returns_start(count_calls):
    """max_steps=0 returns x0 without evaluating the function."""
    f = count_calls(circle_diagonal)
    out = newton(f, [3, 3], 0)
    assert f.calls == 0
    assert out.dtype == float
    assert_allclose(out, [3.0, 3.0])


def test_singular_jacobian_raises():
    """A singular Jacobian aborts the run."""
    with pytest.raises(SingularMatrixError):
        newton(parallel_lines, [3.0, 3.0])
    with pytest.raises(np.linalg.LinAlgError):
        newton_step(parallel_lines, [3.0, 3.0])


def test_non_square_system_raises():
    """The number of equations must equal the number of unknowns."""
    with pytest.raises(ValueError):
        newton(lambda v: [v[0], v[1], v[0] * v[1]], [1.0, 2.0])


@pytest.mark.parametrize("max_steps, exc", [(-1, ValueError), (2.0, TypeError), (True, TypeError)])
def test_invalid_step_count(max_steps, exc):
    """max_steps must be a non-negative integer."""
    with pytest.raises(exc):
        newton(circle_diagonal, [3.0, 3.0], max_steps)


def test_custom_solver():
    """The linear solve can be swapped out."""
    calls = []

    def solver(matrix, vector):
        calls.append(matrix.shape)
        return np.linalg.solve(matrix, vector)

    out = newton(circle_diagonal, [3.0, 3.0], 10, solver=solver)
    assert calls == [(2, 2)] * 10
    assert_allclose(out, [ROOT, ROOT], rtol=1e-12)


def test_debug_logging(caplog):
    """Each step is traced at DEBUG level."""
    with caplog.at_level(logging.DEBUG, logger="dualkit"):
        newton(circle_diagonal, [3.0, 3.0], 2)
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("newton: step 1/2") for m in messages)
    assert any(m.startswith("newton: step 2/2") for m in messages)


def test_newton_tol_converges():
    """The tolerance variant stops once the residual is small."""
    result = newton_tol(circle_diagonal, [3.0, 3.0])
    assert result.status is NewtonStatus.CONVERGED
    assert result.converged
    assert result.residual <= 1e-10
    assert 0 < result.n_steps <= 10
    assert_allclose(result.x, [ROOT, ROOT], rtol=1e-10)


def test_newton_tol_at_root(count_calls):
    """Starting at a root converges without taking a step."""
    f = count_calls(lambda v: [v[0] - 1.0, v[1] - 2.0])
    result = newton_tol(f, [1.0, 2.0])
    assert result.status is NewtonStatus.CONVERGED
    assert result.n_steps == 0
    assert result.residual == 0.0
    assert f.calls == 1


def test_newton_tol_budget_exhausted(caplog):
    """Running out of steps reports FAILED and logs a warning."""
    with caplog.at_level(logging.WARNING, logger="dualkit"):
        result = newton_tol(circle_diagonal, [3.0, 3.0], config=NewtonConfig(max_steps=2))
    assert result.status is NewtonStatus.FAILED
    assert not result.converged
    assert result.n_steps == 2
    assert result.residual > 1e-10
    assert "did not converge" in caplog.text


def test_newton_tol_non_finite_residual():
    """A NaN residual ends the run as FAILED."""
    def f(v):
        return [np.sqrt(v[0]) - 1.0, v[1]]

    with np.errstate(invalid="ignore"):
        result = newton_tol(f, [-1.0, 0.0])
    assert result.status is NewtonStatus.FAILED
    assert result.n_steps == 0
    assert np.isnan(result.residual)


def test_newton_tol_singular_raises():
    """Singular Jacobians propagate from the tolerance variant too."""
    with pytest.raises(SingularMatrixError):
        newton_tol(parallel_lines, [3.0, 3.0])


def test_newton_tol_cond_limit():
    """Jacobians beyond the configured condition limit are rejected."""
    # J(3, 3) = [[6, 6], [1, -1]] has condition number 6.
    with pytest.raises(SingularMatrixError):
        newton_tol(circle_diagonal, [3.0, 3.0], config=NewtonConfig(cond_limit=1.5))


def test_newton_config_defaults():
    """Default configuration."""
    config = NewtonConfig()
    assert config.max_steps == 50
    assert config.tol == 1e-10
    assert config.cond_limit is None
    assert repr(config) == "NewtonConfig(max_steps=50, tol=1e-10, cond_limit=None)"


@pytest.mark.parametrize(
    "kwargs, exc",
    [
        ({"max_steps": -1}, ValueError),
        ({"max_steps": 1.5}, TypeError),
        ({"tol": -1e-3}, ValueError),
        ({"tol": np.nan}, ValueError),
        ({"cond_limit": 1.0}, ValueError),
    ],
)
def test_newton_config_validation(kwargs, exc):
    """Invalid settings are rejected at construction."""
    with pytest.raises(exc):
        NewtonConfig(**kwargs)
