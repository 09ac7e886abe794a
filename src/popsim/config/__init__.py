"""Configuration management for popsim."""

from .core import Config, load_config, save_config
from .schemas import (
    ModelConfig,
    SimulationConfig,
    TimeConfig,
    VisualizationConfig,
)

__all__ = [
    "Config",
    "load_config",
    "save_config",
    "ModelConfig",
    "SimulationConfig",
    "TimeConfig",
    "VisualizationConfig",
]
