"""High-level workflow orchestration for popsim."""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import numpy as np
import yaml
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from .config import Config, load_config
from .model import create_model
from .simulation import create_integrator
from .visualization import create_renderer

console = Console()
logger = logging.getLogger(__name__)


def run_simulation(
    config: Config,
    output_dir: Optional[Path] = None,
    verbose: bool = True,
    save_intermediate: bool = True,
) -> Dict[str, Any]:
    """
    Build the model, integrate it and render the trace.

    Args:
        config: Complete configuration object
        output_dir: Directory to save outputs (defaults to config.output_dir)
        verbose: Whether to print progress information
        save_intermediate: Whether to save the trace and a run summary

    Returns:
        Dictionary with the model, the trace, the figure path (or None)
        and the output directory
    """
    if output_dir is None:
        output_dir = config.output_dir
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    results: Dict[str, Any] = {"output_dir": output_dir, "figure_path": None}

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        disable=not verbose,
    ) as progress:

        # Step 1: Build the model
        task1 = progress.add_task("Building model...", total=None)
        model = create_model(config.model)
        progress.update(task1, description="Model built")
        results["model"] = model

        if verbose:
            console.print(
                f"[green]✓[/green] Created {config.model.type} model "
                f"'{model.name}' with state {list(model.state_names)}"
            )

        # Step 2: Integrate
        task2 = progress.add_task("Integrating...", total=None)
        integrator = create_integrator(config.simulation)
        time_config = config.simulation.time
        trace = integrator.integrate(
            model, time_config.t0, time_config.t1, time_config.min_resolution
        )
        progress.update(task2, description="Integration completed")
        results["trace"] = trace

        if verbose:
            final = trace.final
            values = ", ".join(f"{k}={v:.6g}" for k, v in final.values.items())
            console.print(
                f"[green]✓[/green] {len(trace)} samples with {integrator.name}, "
                f"final t={final.time:g}: {values}"
            )

        if save_intermediate:
            trace_path = output_dir / "trace.npz"
            np.savez(trace_path, **trace.as_dict())
            if verbose:
                console.print(f"[blue]💾[/blue] Trace saved to {trace_path}")

        # Step 3: Render (optional)
        if config.visualization is not None:
            task3 = progress.add_task("Rendering...", total=None)
            renderer = create_renderer(config.visualization)
            save_path = config.visualization.save_path or model.name
            # Figures always land in the output directory
            destination = output_dir / Path(save_path).name
            figure_path = renderer.render(
                trace,
                destination,
                {"title": config.visualization.title or model.name},
            )
            progress.update(task3, description="Rendering completed")
            results["figure_path"] = figure_path

            if verbose:
                console.print(f"[green]✓[/green] Figure written to {figure_path}")

    if save_intermediate:
        summary_path = output_dir / "run_summary.yaml"
        save_run_summary(results, config, summary_path)
        if verbose:
            console.print(f"[blue]💾[/blue] Run summary saved to {summary_path}")

    return results


def run_simulation_from_config_file(
    config_path: str,
    output_dir: Optional[str] = None,
    overrides: Optional[Sequence[str]] = None,
    **kwargs,
) -> Dict[str, Any]:
    """
    Run a simulation from a configuration file.

    Args:
        config_path: Path to YAML configuration file
        output_dir: Output directory (optional)
        overrides: OmegaConf dotlist overrides (optional)
        **kwargs: Additional arguments passed to run_simulation

    Returns:
        Simulation results
    """
    config = load_config(config_path, overrides=overrides)

    if output_dir is not None:
        config.output_dir = Path(output_dir)

    return run_simulation(config, **kwargs)


def save_run_summary(results: Dict[str, Any], config: Config, save_path: Path) -> None:
    """Save a summary of a simulation run."""
    summary: Dict[str, Any] = {
        "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        "config": config.to_dict(),
    }

    if "model" in results:
        summary["model"] = results["model"].get_model_info()

    if "trace" in results:
        info = results["trace"].get_trace_info()
        info["time_span"] = list(info.get("time_span", ()))
        summary["trace"] = info

    if results.get("figure_path") is not None:
        summary["figure"] = str(results["figure_path"])

    with open(save_path, "w") as f:
        yaml.dump(summary, f, default_flow_style=False, indent=2)
    logger.debug("Run summary written to %s", save_path)
