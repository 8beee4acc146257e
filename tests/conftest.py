"""Pytest configuration and shared fixtures for descentkit tests.

This module provides:
- A deterministic numpy RNG fixture
- Shared objective functions used across the optimizer tests
"""

import os

import numpy as np
import pytest


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Seed numpy's legacy global generator for every test."""
    np.random.seed(_seed())


def rosenbrock(x: np.ndarray) -> float:
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def rosenbrock_grad(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )


def rosenbrock_hess(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            [1200 * x[0] ** 2 - 400 * x[1] + 2, -400 * x[0]],
            [-400 * x[0], 200],
        ]
    )


def shifted_parabola(x: float) -> float:
    return (x - 2) ** 2 - 1


def shifted_parabola_grad(x: float) -> float:
    return 2 * (x - 2)


@pytest.fixture
def rosen():
    """Rosenbrock objective, gradient and Hessian."""
    return rosenbrock, rosenbrock_grad, rosenbrock_hess


@pytest.fixture
def parabola():
    """Scalar objective (x - 2)^2 - 1 with its derivative."""
    return shifted_parabola, shifted_parabola_grad
