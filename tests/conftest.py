"""Pytest configuration with shared fixtures for the dualkit tests."""

import os

import pytest

from dualkit.dual import elementary

__all__ = ["count_calls", "isolated_registry"]


@pytest.fixture(autouse=True, scope="session")
def _limit_blas_threads():
    os.environ.setdefault("OMP_NUM_THREADS", "1")
    os.environ.setdefault("OPENBLAS_NUM_THREADS", "1")
    os.environ.setdefault("MKL_NUM_THREADS", "1")


@pytest.fixture
def count_calls():
    """Return a wrapper that counts how often a function is evaluated.

    The wrapped function exposes the running total as ``wrapped.calls``.
    """
    def _wrap(function):
        def wrapped(*args, **kwargs):
            wrapped.calls += 1
            return function(*args, **kwargs)

        wrapped.calls = 0
        return wrapped

    return _wrap


@pytest.fixture
def isolated_registry(monkeypatch):
    """Let a test register elementary functions without leaking them."""
    monkeypatch.setattr(elementary, "_ELEMENTARY_SPECS", list(elementary._ELEMENTARY_SPECS))
    elementary._rule_maps.cache_clear()
    yield elementary
    elementary._rule_maps.cache_clear()
