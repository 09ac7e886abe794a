"""Configuration schemas for popsim."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ModelConfig:
    """Configuration for a population model."""

    type: str = "malthusian"
    """Model type ('malthusian', 'logistic', 'allee', 'custom')"""

    name: Optional[str] = None
    """Run label, defaults to the model type"""

    parameters: Dict[str, Any] = field(default_factory=dict)
    """Constant parameters (e.g. g, k, a, x0)"""

    initials: Dict[str, float] = field(default_factory=dict)
    """Initial values of the state variables"""

    formulas: Dict[str, Any] = field(default_factory=dict)
    """Formula name -> expression string or number (custom models)"""

    derivatives: Dict[str, str] = field(default_factory=dict)
    """Derivative name -> integrated state variable (custom models)"""

    captures: Optional[List[str]] = None
    """Variables recorded at each sample"""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type,
            "name": self.name,
            "parameters": self.parameters,
            "initials": self.initials,
            "formulas": self.formulas,
            "derivatives": self.derivatives,
            "captures": self.captures,
        }


@dataclass
class TimeConfig:
    """Time configuration for simulation."""

    t0: float = 0.0
    """Start time"""

    t1: float = 10.0
    """End time"""

    min_resolution: float = 0.1
    """Largest allowed spacing between recorded samples"""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"t0": self.t0, "t1": self.t1, "min_resolution": self.min_resolution}


@dataclass
class SimulationConfig:
    """Configuration for simulation."""

    solver: str = "rk4"
    """Integrator ('rk4', or an adaptive solver: 'diffrax', 'tsit5', 'dopri5', 'dopri8')"""

    time: TimeConfig = field(default_factory=TimeConfig)
    """Time configuration"""

    rtol: float = 1e-5
    """Relative tolerance (adaptive solvers)"""

    atol: float = 1e-8
    """Absolute tolerance (adaptive solvers)"""

    max_steps: int = 4096
    """Maximum number of internal steps per sampling interval (adaptive solvers)"""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "solver": self.solver,
            "time": self.time.to_dict(),
            "rtol": self.rtol,
            "atol": self.atol,
            "max_steps": self.max_steps,
        }


@dataclass
class VisualizationConfig:
    """Configuration for rendering a trace."""

    backend: str = "matplotlib"
    """Rendering backend"""

    save_path: Optional[str] = None
    """Output file name, relative to the output directory (defaults to '<model name>.svg')"""

    title: Optional[str] = None
    """Plot title (defaults to the model name)"""

    xlabel: str = "t"
    """X axis label"""

    ylabel: Optional[str] = None
    """Y axis label"""

    logy: bool = False
    """Use a logarithmic y axis"""

    parameters: Dict[str, Any] = field(default_factory=dict)
    """Backend-specific parameters (figsize, dpi, names)"""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "backend": self.backend,
            "save_path": self.save_path,
            "title": self.title,
            "xlabel": self.xlabel,
            "ylabel": self.ylabel,
            "logy": self.logy,
            "parameters": self.parameters,
        }
