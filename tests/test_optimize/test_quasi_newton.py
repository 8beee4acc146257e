import numpy as np
import pytest

from descentkit.errors import ConfigurationError, IterationLimitWarning
from descentkit.optimize import (
    QuasiNewtonDirection,
    bfgs_update,
    dfp_update,
    quasi_newton,
    quasi_newton_bfgs,
    quasi_newton_dfp,
    wolfe_powell_rule,
)

A = np.array([[4.0, 1.0], [1.0, 3.0]])
CENTER = np.array([1.0, -2.0])


def quadratic(x: np.ndarray) -> float:
    r = x - CENTER
    return float(0.5 * r @ (A @ r))


def quadratic_grad(x: np.ndarray) -> np.ndarray:
    return A @ (x - CENTER)


@pytest.mark.parametrize("update", [bfgs_update, dfp_update])
def test_updates_satisfy_secant_equation(update):
    h = np.eye(2)
    s = np.array([1.0, 0.5])
    y = np.array([2.0, 0.3])
    h_new = update(h, s, y)
    assert h_new.shape == (2, 2)
    assert np.allclose(h_new @ y, s)
    assert np.allclose(h_new, h_new.T)


@pytest.mark.parametrize("update", [bfgs_update, dfp_update])
def test_updates_skip_non_positive_curvature(update):
    h = np.eye(2)
    s = np.array([1.0, 0.0])
    y = np.array([-1.0, 0.0])
    assert update(h, s, y) is h


@pytest.mark.parametrize("update", [bfgs_update, dfp_update])
def test_scalar_problem_converges_in_two_steps(parabola, update):
    f, grad = parabola
    res = quasi_newton(f, grad, -0.5, update_h=update, h0=1.0)
    assert res.success
    assert res.nit == 2
    assert res.x == pytest.approx(2.0)
    assert abs(grad(res.x)) == pytest.approx(0.0, abs=1e-3)


def test_bfgs_reaches_rosenbrock_minimum(rosen):
    f, grad, _ = rosen
    res = quasi_newton_bfgs(f, grad, np.array([-1.2, 1.0]), tol=1e-6, maxiter=200)
    assert res.success
    assert np.allclose(res.x, np.ones(2), atol=1e-4)
    assert res.fun < 1e-9


def test_bfgs_identity_start_gradient_tolerance(rosen):
    f, grad, _ = rosen
    res = quasi_newton(
        f,
        grad,
        np.array([-0.5, 1.0]),
        update_h=bfgs_update,
        h0=np.eye(2),
        step_size=wolfe_powell_rule,
        tol=1e-3,
        maxiter=500,
    )
    assert res.success
    assert np.linalg.norm(grad(res.x)) < 1e-3


@pytest.mark.parametrize("method", [quasi_newton_bfgs, quasi_newton_dfp])
def test_quadratic_minimum_found(method):
    res = method(quadratic, quadratic_grad, np.array([3.0, 1.5]), tol=1e-6, maxiter=200)
    assert res.success
    assert np.allclose(res.x, CENTER, atol=1e-5)


def test_direction_rule_tracks_inverse_hessian():
    rule = QuasiNewtonDirection(bfgs_update, np.eye(2))
    x0 = np.array([3.0, 1.5])
    d0 = rule(quadratic_grad, x0)
    assert np.allclose(d0, -quadratic_grad(x0))
    assert rule.updates == 0
    x1 = x0 + 0.1 * d0
    rule(quadratic_grad, x1)
    assert rule.updates == 1
    s = x1 - x0
    y = quadratic_grad(x1) - quadratic_grad(x0)
    assert np.allclose(rule.h @ y, s)


def test_update_with_wrong_shape_raises():
    def bad_update(h, s, y):
        return np.eye(3)

    with pytest.raises(ValueError):
        quasi_newton(quadratic, quadratic_grad, np.array([3.0, 1.5]), update_h=bad_update, step_size=0.1)


def test_initial_matrix_shape_is_validated():
    with pytest.raises(ConfigurationError):
        quasi_newton(quadratic, quadratic_grad, np.array([3.0, 1.5]), update_h=bfgs_update, h0=np.eye(3))
    with pytest.raises(ConfigurationError):
        quasi_newton(quadratic, quadratic_grad, np.array([3.0, 1.5]), update_h="bfgs")


def test_degenerate_recurrence_surfaces_as_iteration_cap():
    def f(x):
        return float(np.sum(x**2))

    def grad(x):
        return 2 * x

    def ascent_update(h, s, y):
        return -np.eye(2)

    with pytest.warns(IterationLimitWarning):
        res = quasi_newton(
            f, grad, np.array([1.0, 1.0]), update_h=ascent_update, step_size=0.1, maxiter=20
        )
    assert not res.success
    assert np.all(np.isnan(res.x))
    assert res.nit == 20
