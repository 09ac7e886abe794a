"""Factory functions for creating integrators."""

from typing import Callable, Dict, Optional, Type

from .adaptive import SOLVERS, DiffraxIntegrator
from .base import Integrator
from .rk4 import RK4Integrator
from .trace import Trace
from ..config.schemas import SimulationConfig
from ..model.base import Model

# Registry of available integrators
INTEGRATOR_REGISTRY: Dict[str, Type[Integrator]] = {
    "rk4": RK4Integrator,
    "diffrax": DiffraxIntegrator,
}


def create_integrator(config: Optional[SimulationConfig] = None) -> Integrator:
    """
    Create an integrator from configuration.

    Args:
        config: Simulation configuration (defaults to fixed-step RK4)

    Returns:
        Configured integrator

    Raises:
        ValueError: If solver type is not recognized
    """
    config = config or SimulationConfig()
    integrator_type = config.solver.lower()

    # Map adaptive solver names to the diffrax engine
    if integrator_type in SOLVERS:
        integrator_type = "diffrax"

    if integrator_type not in INTEGRATOR_REGISTRY:
        available_types = list(INTEGRATOR_REGISTRY.keys()) + list(SOLVERS.keys())
        raise ValueError(
            f"Unknown solver: {config.solver}. "
            f"Available solvers: {available_types}"
        )

    integrator_class = INTEGRATOR_REGISTRY[integrator_type]
    return integrator_class(config)


def integrate(
    model: Model,
    start: float,
    end: float,
    min_resolution: float,
    method: str = "rk4",
    should_cancel: Optional[Callable[[], bool]] = None,
    **options,
) -> Trace:
    """
    Integrate ``model`` from ``start`` to ``end`` with the named method.

    Extra keyword arguments (``rtol``, ``atol``, ``max_steps``) are passed
    to :class:`SimulationConfig`.
    """
    integrator = create_integrator(SimulationConfig(solver=method, **options))
    return integrator.integrate(model, start, end, min_resolution, should_cancel=should_cancel)
