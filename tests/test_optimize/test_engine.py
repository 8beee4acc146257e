import math
import warnings

import numpy as np
import pytest

from descentkit.errors import ConfigurationError, ConvergenceWarning, IterationLimitWarning
from descentkit.optimize import LineSearchConfig, Status, general_line_search


def negative_gradient(grad, x):
    return -grad(x)


def test_starting_at_stationary_point_returns_immediately(parabola):
    f, grad = parabola
    res = general_line_search(f, grad, 2.0, direction=negative_gradient, step_size=0.5)
    assert res.success
    assert res.status is Status.CONVERGED
    assert res.x == pytest.approx(2.0)
    assert res.nit == 0


def test_tight_tolerance_reaches_zero_gradient(parabola):
    f, grad = parabola
    res = general_line_search(
        f, grad, 5.0, direction=negative_gradient, step_size=0.5, tol=1e-10
    )
    assert res.success
    assert abs(grad(res.x)) <= 1e-10
    assert isinstance(res.x, float)


def test_oscillating_step_returns_nan_sentinel():
    def f(x):
        return x**2 - 1

    def grad(x):
        return 2 * x

    with pytest.warns(IterationLimitWarning):
        res = general_line_search(
            f, grad, 2.0, direction=negative_gradient, step_size=1, maxiter=50
        )
    assert math.isnan(res.x)
    assert res.status is Status.MAX_ITER
    assert not res.success
    assert res.nit == 50
    assert abs(res.x_last) == pytest.approx(2.0)


def test_wrong_gradient_warns_but_still_runs():
    def f(x):
        return x**2 - 1

    def wrong_grad(x):
        return 2 * x - 1

    with pytest.warns(ConvergenceWarning):
        res = general_line_search(
            f, wrong_grad, 2.0, direction=negative_gradient, step_size=0.5
        )
    # The stationary point of the wrong gradient.
    assert res.success
    assert res.x == pytest.approx(0.5)


def test_gradient_check_outside_objective_domain_only_warns():
    def f(x):
        return (math.log(x - 20.0) - 1.0) ** 2

    def grad(x):
        return 2.0 * (math.log(x - 20.0) - 1.0) / (x - 20.0)

    with pytest.warns(ConvergenceWarning):
        res = general_line_search(
            f, grad, 25.0, direction=negative_gradient, step_size=1.0, seed=0
        )
    assert res.success
    assert res.x == pytest.approx(20.0 + math.e, abs=1e-3)


def test_final_recheck_failure_returns_sentinel():
    res = general_line_search(
        lambda x: 0.0,
        lambda x: math.nan,
        1.0,
        direction=negative_gradient,
        step_size=0.5,
        check_gradient=False,
    )
    assert res.status is Status.NOT_CONVERGED
    assert math.isnan(res.x)
    assert not res.success
    assert res.nit == 0
    assert res.x_last == 1.0


def test_correct_gradient_does_not_warn(parabola):
    f, grad = parabola
    with warnings.catch_warnings():
        warnings.simplefilter("error", ConvergenceWarning)
        res = general_line_search(
            f, grad, 5.0, direction=negative_gradient, step_size=0.5, seed=3
        )
    assert res.success


def test_two_dimensional_separable_quadratic():
    def f(x):
        return x[0] ** 2 + (x[1] - 1) ** 2

    def grad(x):
        return np.array([2 * x[0], 2 * (x[1] - 1)])

    res = general_line_search(
        f,
        grad,
        np.array([2.0, 2.0]),
        direction=negative_gradient,
        step_size=0.5,
        tol=1e-10,
    )
    assert res.success
    assert np.allclose(res.x, [0.0, 1.0], atol=1e-10)
    assert res.nfev == 2
    assert res.njev == 2


def test_iteration_counter_bounds():
    A = np.diag([1.0, 2.0])

    def f(x):
        return 0.5 * x @ (A @ x)

    def grad(x):
        return A @ x

    x0 = np.array([1.0, 1.0])
    ok = general_line_search(f, grad, x0, direction=negative_gradient, step_size=0.3, maxiter=500)
    assert ok.success
    assert ok.nit < 500

    with pytest.warns(IterationLimitWarning):
        capped = general_line_search(
            f, grad, x0, direction=negative_gradient, step_size=0.3, maxiter=3
        )
    assert capped.nit == 3
    assert np.all(np.isnan(capped.x))
    assert capped.x.shape == x0.shape


def test_non_finite_iterates_are_reported_as_divergence():
    def f(x):
        return np.float64(x) ** 4

    def grad(x):
        return 4 * np.float64(x) ** 3

    with np.errstate(over="ignore", invalid="ignore"):
        res = general_line_search(
            f,
            grad,
            10.0,
            direction=negative_gradient,
            step_size=1.0,
            maxiter=100,
            check_gradient=False,
        )
    assert res.status is Status.DIVERGED
    assert math.isnan(res.x)
    assert res.nit < 100


def test_same_configuration_is_deterministic():
    def f(x):
        return float(np.sum((x - 0.5) ** 2))

    def grad(x):
        return 2 * (x - 0.5)

    kwargs = dict(direction=negative_gradient, step_size=0.2, history=True, seed=7)
    res1 = general_line_search(f, grad, np.array([0.5, -0.25]), **kwargs)
    res2 = general_line_search(f, grad, np.array([0.5, -0.25]), **kwargs)
    assert res1.status is res2.status
    assert res1.nit == res2.nit
    assert np.allclose(res1.x, res2.x)
    assert np.allclose(res1.history[-1].x, res2.history[-1].x)


def test_history_records_every_iterate_and_final_point():
    def f(x):
        return float(np.sum(x**2))

    def grad(x):
        return 2 * x

    res = general_line_search(
        f, grad, np.array([1.0, -1.0]), direction=negative_gradient, step_size=0.25, history=True
    )
    assert res.success
    assert len(res.history) == res.nit + 1
    assert [r.index for r in res.history] == list(range(res.nit + 1))
    assert res.history[0].fun == pytest.approx(2.0)
    assert np.allclose(res.history[-1].x, res.x_last)


def test_invalid_configuration_fails_before_evaluation():
    calls = []

    def f(x):
        calls.append(x)
        return x**2

    def grad(x):
        calls.append(x)
        return 2 * x

    with pytest.raises(ConfigurationError):
        general_line_search(f, grad, 1.0, direction=negative_gradient, step_size="fast")
    with pytest.raises(ConfigurationError):
        general_line_search(f, grad, 1.0, direction=negative_gradient, tol=0.0)
    with pytest.raises(ConfigurationError):
        general_line_search(f, grad, 1.0, direction=negative_gradient, maxiter=0)
    with pytest.raises(ConfigurationError):
        general_line_search(f, grad, 1.0, direction=negative_gradient, max_iterations=10)
    with pytest.raises(ConfigurationError):
        general_line_search(f, grad, 1.0, direction=None)
    assert calls == []


def test_config_object_and_overrides_combine(parabola):
    f, grad = parabola
    base = LineSearchConfig(tol=1e-3, maxiter=5)
    with pytest.warns(IterationLimitWarning):
        res = general_line_search(
            f, grad, 5.0, direction=negative_gradient, step_size=0.01, config=base
        )
    assert res.nit == 5
    res = general_line_search(
        f, grad, 5.0, direction=negative_gradient, step_size=0.5, config=base, maxiter=10
    )
    assert res.success
    assert base.maxiter == 5


def test_explicit_logger_receives_diagnostics(parabola, caplog):
    import logging

    f, grad = parabola
    logger = logging.getLogger("descentkit-tests.sink")
    with caplog.at_level(logging.DEBUG, logger="descentkit-tests.sink"):
        general_line_search(
            f, grad, 5.0, direction=negative_gradient, step_size=0.5, logger=logger
        )
    messages = [r.getMessage() for r in caplog.records if r.name == "descentkit-tests.sink"]
    assert any("Gradient tolerance satisfied" in m for m in messages)
