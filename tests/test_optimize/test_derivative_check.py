import math

import numpy as np

from descentkit.optimize import check_derivative, random_probe


def test_correct_vector_gradient_passes(rng):
    def f(x):
        return x[0] ** 2 + (x[1] - 1) ** 2

    def grad(x):
        return np.array([2 * x[0], 2 * (x[1] - 1)])

    probe = random_probe(np.zeros(2), rng)
    assert check_derivative(f, grad, probe)


def test_wrong_scalar_gradient_fails(rng):
    def f(x):
        return x**2 - 1

    def wrong_grad(x):
        return 2 * x - 1

    assert not check_derivative(f, wrong_grad, random_probe(1.0, rng))
    assert check_derivative(f, lambda x: 2 * x, random_probe(1.0, rng))


def test_random_probe_shape_and_range(rng):
    scalar = random_probe(3.0, rng)
    assert isinstance(scalar, float)
    assert 0.0 <= scalar < 10.0

    vector = random_probe(np.zeros(4), rng, scale=2.0)
    assert vector.shape == (4,)
    assert np.all((vector >= 0.0) & (vector < 2.0))


def test_non_finite_values_fail_without_raising():
    def f(x):
        return math.nan

    assert not check_derivative(f, lambda x: 0.0, 1.0)


def test_shape_mismatch_fails():
    def f(x):
        return float(np.sum(x**2))

    assert not check_derivative(f, lambda x: np.zeros(3), np.ones(2))


def test_objective_undefined_at_point_fails_without_raising():
    def f(x):
        return math.log(x - 20.0)

    def grad(x):
        return 1.0 / (x - 20.0)

    assert not check_derivative(f, grad, 4.0)
