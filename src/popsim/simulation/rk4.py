"""Fixed-step classic Runge-Kutta engine."""

import numpy as np

from .base import Integrator, State, Stepper
from ..exceptions import NumericalInstabilityError
from ..model.base import Model


class RK4Integrator(Integrator):
    """
    Classic 4th-order Runge-Kutta with one step per sampling interval.

    The step size is the sampling interval chosen by :func:`plan_steps`, so
    the global error is O(h^4) in ``min_resolution``.
    """

    name = "rk4"

    def make_stepper(self, model: Model) -> Stepper:
        names = model.state_names

        def derivatives(t: float, time: float, y: np.ndarray, state: State) -> np.ndarray:
            rates = model.rates(time, dict(zip(names, y)))
            k = np.array([rates[name] for name in names], dtype=float)
            if not np.all(np.isfinite(k)):
                raise NumericalInstabilityError(t, state, f"non-finite derivative at t={time}")
            return k

        def step(t: float, t_next: float, state: State) -> State:
            h = t_next - t
            y = np.array([state[name] for name in names], dtype=float)

            k1 = derivatives(t, t, y, state)
            k2 = derivatives(t, t + h / 2, y + h / 2 * k1, state)
            k3 = derivatives(t, t + h / 2, y + h / 2 * k2, state)
            k4 = derivatives(t, t + h, y + h * k3, state)
            y_next = y + h / 6 * (k1 + 2 * k2 + 2 * k3 + k4)

            return dict(zip(names, y_next))

        return step
