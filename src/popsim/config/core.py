"""Loading, merging and saving popsim run configurations."""

from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

import yaml
from omegaconf import DictConfig, OmegaConf

from .schemas import ModelConfig, SimulationConfig, TimeConfig, VisualizationConfig

_SECTIONS = {"model", "simulation", "visualization"}


class Config:
    """Main configuration container for popsim runs."""

    def __init__(
        self,
        model: ModelConfig,
        simulation: SimulationConfig,
        visualization: Optional[VisualizationConfig] = None,
        output_dir: str = "./outputs",
        **kwargs,
    ):
        self.model = model
        self.simulation = simulation
        self.visualization = visualization
        self.output_dir = Path(output_dir)

        # Extra top-level keys become attributes
        for key, value in kwargs.items():
            setattr(self, key, value)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "Config":
        """Build a Config from a plain dict; missing sections take their defaults."""
        model = ModelConfig(**(config_dict.get("model") or {}))

        sim_dict = dict(config_dict.get("simulation") or {})
        if isinstance(sim_dict.get("time"), dict):
            sim_dict["time"] = TimeConfig(**sim_dict["time"])
        simulation = SimulationConfig(**sim_dict)

        visualization = None
        if config_dict.get("visualization") is not None:
            visualization = VisualizationConfig(**config_dict["visualization"])

        other_keys = {k: v for k, v in config_dict.items() if k not in _SECTIONS}

        return cls(
            model=model,
            simulation=simulation,
            visualization=visualization,
            **other_keys,
        )

    @classmethod
    def from_omegaconf(cls, conf: DictConfig) -> "Config":
        """Create Config from an OmegaConf DictConfig."""
        return cls.from_dict(OmegaConf.to_container(conf, resolve=True))

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict form, suitable for YAML (paths become strings)."""
        result: Dict[str, Any] = {
            "model": self.model.to_dict(),
            "simulation": self.simulation.to_dict(),
        }
        if self.visualization:
            result["visualization"] = self.visualization.to_dict()

        for key, value in self.__dict__.items():
            if key not in _SECTIONS:
                result[key] = str(value) if isinstance(value, Path) else value

        return result


def load_config(
    config_path: Union[str, Path], overrides: Optional[Sequence[str]] = None
) -> Config:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML file
        overrides: OmegaConf dotlist entries applied on top of the file,
            e.g. ``["model.parameters.g=0.5", "simulation.time.t1=50"]``

    Returns:
        Parsed configuration
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    conf = OmegaConf.load(config_path)
    if overrides:
        conf = OmegaConf.merge(conf, OmegaConf.from_dotlist(list(overrides)))

    return Config.from_omegaconf(conf)


def save_config(config: Config, save_path: Union[str, Path]) -> None:
    """Write ``config`` to ``save_path`` as YAML, creating parent directories."""
    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)

    with open(save_path, "w") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, indent=2)
