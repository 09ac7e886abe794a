import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import matplotlib.pyplot as plt

from .base import Renderer
from ..exceptions import RenderError
from ..simulation.trace import Trace

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = ".svg"


class MatplotlibRenderer(Renderer):
    """
    Line plot of every captured variable against time, saved with matplotlib.

    Options (per call, falling back to the visualization config):
        title: Plot title
        xlabel, ylabel: Axis labels
        names: Subset of captured variables to draw
        logy: Logarithmic y axis
        figsize, dpi: Figure geometry
    """

    def _option(self, options: Dict[str, Any], key: str, default: Any = None) -> Any:
        if key in options:
            return options[key]
        if hasattr(self.config, key):
            return getattr(self.config, key)
        return self.config.parameters.get(key, default)

    def render(
        self,
        trace: Trace,
        destination: Union[str, Path],
        options: Optional[Dict[str, Any]] = None,
    ) -> Path:
        options = dict(options or {})
        destination = Path(destination)
        if not destination.suffix:
            destination = destination.with_suffix(DEFAULT_FORMAT)

        if len(trace) == 0:
            raise RenderError("Cannot render an empty trace")

        names = self._option(options, "names") or list(trace.names)
        unknown = [name for name in names if name not in trace.names]
        if unknown:
            raise RenderError(f"Variables not captured in trace: {unknown}")

        figsize = tuple(self._option(options, "figsize", (8, 5)))
        dpi = self._option(options, "dpi", 100)
        title = self._option(options, "title")
        xlabel = self._option(options, "xlabel", "t")
        ylabel = self._option(options, "ylabel")

        fig, ax = plt.subplots(figsize=figsize, dpi=dpi)
        try:
            times = trace.times
            for name in names:
                ax.plot(times, trace.series(name), label=name)

            ax.set_xlabel(xlabel)
            if ylabel:
                ax.set_ylabel(ylabel)
            if title:
                ax.set_title(title)
            if self._option(options, "logy", False):
                ax.set_yscale("log")
            if len(names) > 1:
                ax.legend()
            ax.grid(True, alpha=0.3)

            destination.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(destination, bbox_inches="tight")
        except (OSError, ValueError) as e:
            raise RenderError(f"Failed to render {destination}: {e}") from e
        finally:
            plt.close(fig)

        logger.info("Rendered %d samples to %s", len(trace), destination)
        return destination
