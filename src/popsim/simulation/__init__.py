"""Simulation module for integrating population models."""

from .adaptive import DiffraxIntegrator
from .base import Integrator, plan_steps
from .factory import create_integrator, integrate
from .rk4 import RK4Integrator
from .trace import Sample, Trace

__all__ = [
    "Integrator",
    "RK4Integrator",
    "DiffraxIntegrator",
    "Trace",
    "Sample",
    "create_integrator",
    "integrate",
    "plan_steps",
]
