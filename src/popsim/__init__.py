"""
popsim: population growth simulation with named-formula ODE models.

This package provides:
1. Models built from named state variables, formulas and derivative bindings
2. Fixed-step RK4 and adaptive (diffrax) integration onto a sampled trace
3. Rendering of traces to SVG with matplotlib
4. YAML configuration and a command line shell

Example:
    >>> import popsim as ps
    >>>
    >>> model = ps.Model(
    ...     initials={"x": 3},
    ...     formulas={"growth_constant": 1, "velocity": "growth_constant*x"},
    ...     derivatives={"velocity": "x"},
    ... )
    >>> trace = ps.integrate(model, 0, 8, 0.5)
    >>> ps.render(trace, "malthusian.svg", {"title": "Malthusian growth"})
"""

__version__ = "0.1.0"

from .config import Config, load_config
from .exceptions import (
    CyclicFormulaError,
    IntegrationCancelledError,
    IntegrationError,
    InvalidRangeError,
    InvalidResolutionError,
    ModelDefinitionError,
    ModelError,
    NumericalInstabilityError,
    PopsimError,
    RenderError,
    UnresolvedReferenceError,
)
from .model import Model, create_model
from .simulation import Integrator, Trace, create_integrator, integrate
from .visualization import Renderer, create_renderer, render
from .workflow import run_simulation, run_simulation_from_config_file

__all__ = [
    # Workflow
    "load_config",
    "create_model",
    "create_integrator",
    "create_renderer",
    "integrate",
    "render",
    "run_simulation",
    "run_simulation_from_config_file",
    # Core classes
    "Config",
    "Model",
    "Integrator",
    "Trace",
    "Renderer",
    # Errors
    "PopsimError",
    "ModelError",
    "ModelDefinitionError",
    "UnresolvedReferenceError",
    "CyclicFormulaError",
    "IntegrationError",
    "InvalidRangeError",
    "InvalidResolutionError",
    "NumericalInstabilityError",
    "IntegrationCancelledError",
    "RenderError",
]
