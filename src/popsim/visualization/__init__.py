"""Rendering module for popsim traces.

Rendering is kept outside the integration core: a renderer receives a
finished :class:`~popsim.simulation.Trace` plus a destination and a title.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from .base import Renderer
from .matplotlib_visualization import MatplotlibRenderer
from ..config.schemas import VisualizationConfig
from ..simulation.trace import Trace


def create_renderer(config: Optional[VisualizationConfig] = None) -> Renderer:
    """Create a renderer from configuration (expects config.backend)."""
    config = config or VisualizationConfig()
    backend = (config.backend or "").lower()
    if backend == "matplotlib":
        return MatplotlibRenderer(config)
    raise ValueError(f"Unknown visualization backend: {config.backend}")


def render(
    trace: Trace,
    destination: Union[str, Path],
    options: Optional[Dict[str, Any]] = None,
    config: Optional[VisualizationConfig] = None,
) -> Path:
    """Render ``trace`` to ``destination`` with the configured backend."""
    return create_renderer(config).render(trace, destination, options)


__all__ = [
    "Renderer",
    "MatplotlibRenderer",
    "create_renderer",
    "render",
]
