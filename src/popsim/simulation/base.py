"""Base classes for integration engines."""

import logging
import math
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from ..config.schemas import SimulationConfig
from ..exceptions import (
    IntegrationCancelledError,
    InvalidRangeError,
    InvalidResolutionError,
    NumericalInstabilityError,
)
from ..model.base import Model
from .trace import Trace

logger = logging.getLogger(__name__)

State = Dict[str, float]
Stepper = Callable[[float, float, State], State]

_STEP_SLACK = 1e-9


def plan_steps(start: float, end: float, min_resolution: float) -> Tuple[int, float]:
    """
    Split ``[start, end]`` into equal steps no longer than ``min_resolution``.

    Returns:
        (n_steps, h) with ``n_steps * h == end - start``

    Raises:
        InvalidRangeError: ``end <= start`` or a non-finite bound
        InvalidResolutionError: ``min_resolution <= 0``, or a step too small
            to keep sample times distinct at this magnitude
    """
    if not (math.isfinite(start) and math.isfinite(end)) or end <= start:
        raise InvalidRangeError(start, end)
    if not min_resolution > 0:
        raise InvalidResolutionError(min_resolution)

    span = end - start
    # The slack keeps e.g. 1.0 / 0.1 == 10.000000000000002 at ten steps
    n_steps = max(1, math.ceil(span / min_resolution * (1.0 - _STEP_SLACK)))
    h = span / n_steps

    # Sample times start + i*h must stay distinct after rounding
    if not h > math.ulp(max(abs(start), abs(end))):
        raise InvalidResolutionError(
            min_resolution,
            f"step {h:g} is below float precision at t={start:g}; "
            "sample times would not increase",
        )
    return n_steps, h


def _all_finite(values: Dict[str, float]) -> bool:
    return bool(np.all(np.isfinite(np.array(list(values.values()), dtype=float))))


class Integrator(ABC):
    """
    Abstract base class for integration engines.

    Subclasses provide :meth:`make_stepper`; the sampling loop, input checks,
    cancellation and non-finite detection live here so that every engine
    records its trace on the same time grid. Integrators hold no state
    between calls and never mutate the model they are given.
    """

    name = "base"

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()

    @abstractmethod
    def make_stepper(self, model: Model) -> Stepper:
        """
        Build the function that advances ``model`` over one sampling interval.

        The returned callable takes ``(t, t_next, state)`` and returns the
        state at ``t_next``.
        """
        pass

    def integrate(
        self,
        model: Model,
        start: float,
        end: float,
        min_resolution: float,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> Trace:
        """
        Integrate ``model`` from ``start`` to ``end``.

        Args:
            model: Model to integrate, starting from ``model.initials``
            start: Start time
            end: End time, must be greater than ``start``
            min_resolution: Largest allowed spacing between samples
            should_cancel: Optional callable checked once per step; when it
                returns True the run stops with IntegrationCancelledError and
                the partial trace is discarded

        Returns:
            Trace with one sample at ``start`` and one after every step
        """
        n_steps, h = plan_steps(start, end, min_resolution)
        logger.info(
            "Integrating %s with %s from t=%g to t=%g", model.name, self.name, start, end
        )
        logger.debug("Step plan: %d steps of h=%g", n_steps, h)

        stepper = self.make_stepper(model)
        state: State = {name: np.float64(value) for name, value in model.initials.items()}
        trace = Trace(model.captures)
        t = float(start)

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            trace.append(t, self._capture(model, t, state, t, state))

            for i in range(1, n_steps + 1):
                if should_cancel is not None and should_cancel():
                    logger.info("Integration of %s cancelled at t=%g", model.name, t)
                    raise IntegrationCancelledError(t)

                t_next = float(end) if i == n_steps else start + i * h
                try:
                    new_state = stepper(t, t_next, state)
                except (ZeroDivisionError, OverflowError) as e:
                    raise NumericalInstabilityError(t, state, str(e)) from e

                if not _all_finite(new_state):
                    raise NumericalInstabilityError(t, state, "non-finite state")

                trace.append(t_next, self._capture(model, t_next, new_state, t, state))
                t, state = t_next, new_state

        logger.info("Integration of %s completed: %d samples", model.name, len(trace))
        return trace

    @staticmethod
    def _capture(
        model: Model, t: float, state: State, last_t: float, last_state: State
    ) -> Dict[str, float]:
        try:
            values = model.capture(t, state)
        except (ZeroDivisionError, OverflowError) as e:
            raise NumericalInstabilityError(last_t, last_state, str(e)) from e
        if not _all_finite(values):
            raise NumericalInstabilityError(last_t, last_state, f"non-finite capture at t={t}")
        return values
