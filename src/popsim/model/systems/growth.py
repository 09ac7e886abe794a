"""Population growth models.

Each builder takes a :class:`ModelConfig` and returns a :class:`Model`
whose single state variable ``x`` is the population size. Parameters come
from ``config.parameters`` and fall back to the defaults below; the initial
population is ``x0`` unless ``config.initials["x"]`` is given.
"""

from typing import Any, Dict

from ..base import Model
from ...config.schemas import ModelConfig

MALTHUSIAN_DEFAULTS = {"growth_constant": 1.0, "x0": 3.0}
LOGISTIC_DEFAULTS = {"g": 0.7, "k": 100.0, "x0": 5.0}
ALLEE_DEFAULTS = {"g": 0.7, "a": 20.0, "k": 100.0, "x0": 15.0}


def _resolve_parameters(config: ModelConfig, defaults: Dict[str, float]) -> Dict[str, Any]:
    params = dict(defaults)
    params.update(config.parameters)
    params["x0"] = config.initials.get("x", params["x0"])
    return params


def _build(config: ModelConfig, defaults: Dict[str, float], formulas: Dict[str, str]) -> Model:
    params = _resolve_parameters(config, defaults)
    x0 = params.pop("x0")
    return Model(
        initials={"x": x0},
        formulas={**params, **formulas},
        derivatives={"velocity": "x"},
        captures=config.captures or ["x"],
        name=config.name or config.type,
    )


def malthusian(config: ModelConfig) -> Model:
    """Unbounded exponential growth: dx/dt = growth_constant * x."""
    return _build(config, MALTHUSIAN_DEFAULTS, {"velocity": "growth_constant*x"})


def logistic(config: ModelConfig) -> Model:
    """Growth limited by a carrying capacity k: dx/dt = g*x*(1 - x/k)."""
    return _build(
        config,
        LOGISTIC_DEFAULTS,
        {
            "growth_rate": "g*(1 - x/k)",
            "velocity": "growth_rate*x",
        },
    )


def allee(config: ModelConfig) -> Model:
    """
    Cubic growth with a strong Allee effect.

        dx/dt = g*x*(x/a - 1)*(1 - x/k)

    Populations below the threshold ``a`` decline to extinction, those
    between ``a`` and ``k`` grow towards the carrying capacity ``k``.
    """
    return _build(
        config,
        ALLEE_DEFAULTS,
        {
            "growth_rate": "g*(x/a - 1)*(1 - x/k)",
            "velocity": "growth_rate*x",
        },
    )


def custom(config: ModelConfig) -> Model:
    """Model spelled out entirely in the configuration."""
    return Model(
        initials=config.initials,
        formulas={**config.parameters, **config.formulas},
        derivatives=config.derivatives,
        captures=config.captures,
        name=config.name or config.type,
    )
