"""Base rendering classes."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..config.schemas import VisualizationConfig
from ..simulation.trace import Trace


class Renderer(ABC):
    """
    Abstract base class for trace renderers.

    A renderer turns a finished trace into an image file. It is the only
    place where popsim writes plots; the integration core never touches the
    filesystem.
    """

    def __init__(self, config: Optional[VisualizationConfig] = None):
        self.config = config or VisualizationConfig()

    @abstractmethod
    def render(
        self,
        trace: Trace,
        destination: Union[str, Path],
        options: Optional[Dict[str, Any]] = None,
    ) -> Path:
        """
        Render ``trace`` to ``destination``.

        Args:
            trace: Trace to draw
            destination: Output file; its suffix selects the image format
            options: Per-call options, at least ``{"title": ...}``

        Returns:
            Path of the written file

        Raises:
            RenderError: If the image cannot be produced
        """
        pass
