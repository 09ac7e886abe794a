"""Main CLI entry point for popsim."""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..exceptions import PopsimError
from ..model import list_available_models
from ..workflow import run_simulation_from_config_file

app = typer.Typer(
    name="popsim",
    help="Population growth ODE simulation",
    add_completion=False,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def run(
    config: Path = typer.Argument(..., help="Configuration file path"),
    overrides: Optional[List[str]] = typer.Argument(
        None, help="Config overrides, e.g. model.parameters.g=0.5"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output directory"),
    verbose: bool = typer.Option(True, "--verbose/--quiet", "-v/-q", help="Verbose output"),
    save_intermediate: bool = typer.Option(
        True, "--save/--no-save", help="Save the trace and run summary"
    ),
):
    """Simulate the model described by CONFIG and render its trace."""
    _configure_logging(verbose)
    try:
        results = run_simulation_from_config_file(
            str(config),
            output_dir=str(output) if output else None,
            overrides=overrides or None,
            verbose=verbose,
            save_intermediate=save_intermediate,
        )
    except (PopsimError, FileNotFoundError, ValueError, TypeError) as e:
        console.print(f"[red]❌ Error: {e}[/red]")
        raise typer.Exit(1)

    if verbose:
        console.print("[green]✅ Simulation completed successfully![/green]")
        console.print(f"Results available in: {results['output_dir']}")


@app.command()
def models():
    """List the available model types."""
    for name, builder in list_available_models().items():
        doc = (builder.__doc__ or "").strip().splitlines()
        console.print(f"[bold]{name}[/bold]  {doc[0] if doc else ''}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
