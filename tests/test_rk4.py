import math

import numpy as np
import pytest

from popsim.config import ModelConfig, SimulationConfig
from popsim.exceptions import (
    IntegrationCancelledError,
    InvalidRangeError,
    InvalidResolutionError,
    NumericalInstabilityError,
)
from popsim.model import Model, create_model
from popsim.simulation import RK4Integrator, create_integrator, integrate, plan_steps


def test_plan_steps_divides_the_interval_evenly():
    assert plan_steps(0.0, 8.0, 0.5) == (16, 0.5)

    n_steps, h = plan_steps(0.0, 1.0, 0.1)
    assert n_steps == 10
    assert h == pytest.approx(0.1)

    # Rounds the step count up and shrinks h to fit
    assert plan_steps(0.0, 1.0, 0.3) == (4, 0.25)


def test_malthusian_scenario(malthusian_model):
    trace = integrate(malthusian_model, 0, 8, 0.5)

    assert len(trace) == 17
    assert trace.times[0] == 0.0
    assert trace.times[-1] == 8.0
    assert np.all(np.diff(trace.times) > 0)
    assert trace.final.values["x"] == pytest.approx(3 * math.exp(8), rel=0.01)


def test_malthusian_scenario_at_a_late_start_time(malthusian_model):
    t0 = 1.7e9
    trace = integrate(malthusian_model, t0, t0 + 8, 0.5)

    assert len(trace) == 17
    assert trace.times[0] == t0
    assert trace.times[-1] == t0 + 8
    assert np.all(np.diff(trace.times) > 0)
    assert trace.final.values["x"] == pytest.approx(3 * math.exp(8), rel=0.01)


def test_step_below_float_precision_is_rejected(malthusian_model):
    with pytest.raises(InvalidResolutionError):
        plan_steps(1e16, 1e16 + 8, 0.5)
    with pytest.raises(InvalidResolutionError):
        integrate(malthusian_model, 1e16, 1e16 + 8, 0.5)


def test_error_is_fourth_order_in_step_size():
    model = Model(
        initials={"x": 1.0},
        formulas={"g": 1.0, "velocity": "g*x"},
        derivatives={"velocity": "x"},
    )

    def error(h):
        trace = integrate(model, 0.0, 1.0, h)
        return abs(trace.final.values["x"] - math.e)

    ratio = error(0.1) / error(0.05)
    assert 14.0 < ratio < 18.0


def test_logistic_grows_monotonically_to_capacity(logistic_model):
    trace = integrate(logistic_model(5.0), 0.0, 60.0, 0.1)
    x = trace.series("x")

    assert np.all(np.diff(x) >= -1e-9)
    assert x[-1] == pytest.approx(100.0, rel=1e-3)


def test_logistic_decays_monotonically_to_capacity(logistic_model):
    trace = integrate(logistic_model(150.0), 0.0, 60.0, 0.1)
    x = trace.series("x")

    assert np.all(np.diff(x) <= 1e-9)
    assert x[-1] == pytest.approx(100.0, rel=1e-3)


def test_allee_population_below_threshold_dies_out():
    model = create_model(ModelConfig(type="allee"))
    trace = integrate(model, 0.0, 100.0, 0.5)
    x = trace.series("x")

    assert x[0] == 15.0
    assert np.all(np.diff(x) <= 0)
    assert np.all(x >= 0)
    assert x[-1] < 1e-3


def test_integration_is_deterministic(malthusian_model):
    first = integrate(malthusian_model, 0, 8, 0.5)
    second = integrate(malthusian_model, 0, 8, 0.5)

    assert [(s.time, s.values) for s in first] == [(s.time, s.values) for s in second]


def test_integration_leaves_the_model_untouched(malthusian_model):
    integrate(malthusian_model, 0, 8, 0.5)
    assert malthusian_model.state == {"x": 3.0}
    assert malthusian_model.initials == {"x": 3.0}


def test_time_dependent_rate_is_integrated_exactly():
    model = Model(initials={"x": 0.0}, formulas={"velocity": "t"}, derivatives={"velocity": "x"})
    trace = integrate(model, 0.0, 2.0, 0.25)
    assert trace.final.values["x"] == pytest.approx(2.0, abs=1e-12)


def test_captures_include_auxiliary_variables():
    model = create_model(ModelConfig(type="logistic", captures=["x", "growth_rate", "velocity"]))
    trace = integrate(model, 0.0, 1.0, 0.5)

    assert trace.names == ("x", "growth_rate", "velocity")
    first = trace[0].values
    assert first["growth_rate"] == pytest.approx(0.7 * (1 - 5.0 / 100.0))
    assert first["velocity"] == pytest.approx(first["growth_rate"] * 5.0)


def test_state_without_derivative_stays_constant():
    model = Model(
        initials={"x": 1.0, "capacity": 42.0},
        formulas={"velocity": "x"},
        derivatives={"velocity": "x"},
        captures=["x", "capacity"],
    )
    trace = integrate(model, 0.0, 1.0, 0.1)
    assert np.all(trace.series("capacity") == 42.0)


def test_invalid_range(malthusian_model):
    with pytest.raises(InvalidRangeError):
        integrate(malthusian_model, 0, 0, 0.5)
    with pytest.raises(InvalidRangeError):
        integrate(malthusian_model, 5, 1, 0.5)
    with pytest.raises(ValueError):
        integrate(malthusian_model, 0, float("inf"), 0.5)


def test_invalid_resolution(malthusian_model):
    with pytest.raises(InvalidResolutionError):
        integrate(malthusian_model, 0, 8, 0)
    with pytest.raises(InvalidResolutionError):
        integrate(malthusian_model, 0, 8, -0.5)


def test_cancellation_discards_the_run(malthusian_model):
    calls = []

    def should_cancel():
        calls.append(None)
        return len(calls) > 3

    with pytest.raises(IntegrationCancelledError) as excinfo:
        integrate(malthusian_model, 0, 8, 0.5, should_cancel=should_cancel)
    assert excinfo.value.time == pytest.approx(1.5)


def test_blow_up_is_reported_with_last_valid_point():
    model = Model(initials={"x": 1.0}, formulas={"velocity": "x**2"}, derivatives={"velocity": "x"})

    with pytest.raises(NumericalInstabilityError) as excinfo:
        integrate(model, 0.0, 2.0, 0.1)
    assert 0.9 <= excinfo.value.time < 2.0
    assert math.isfinite(excinfo.value.state["x"])


def test_non_finite_derivative_is_fatal():
    model = Model(
        initials={"x": 1.0},
        formulas={"velocity": lambda v, t: float("nan")},
        derivatives={"velocity": "x"},
    )
    with pytest.raises(NumericalInstabilityError) as excinfo:
        integrate(model, 0.0, 1.0, 0.1)
    assert excinfo.value.time == 0.0


def test_division_by_zero_is_fatal():
    model = Model(
        initials={"x": 1.0},
        formulas={"k": 0, "velocity": "x/k"},
        derivatives={"velocity": "x"},
    )
    with pytest.raises(NumericalInstabilityError):
        integrate(model, 0.0, 1.0, 0.1)


def test_create_integrator():
    assert isinstance(create_integrator(), RK4Integrator)
    assert isinstance(create_integrator(SimulationConfig(solver="RK4")), RK4Integrator)
    with pytest.raises(ValueError):
        create_integrator(SimulationConfig(solver="leapfrog"))
