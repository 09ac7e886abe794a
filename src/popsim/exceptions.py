"""Exception hierarchy for popsim."""

from typing import Dict, Optional, Sequence


class PopsimError(Exception):
    """Base class for all popsim errors."""


# ---------------------------------------------------------------------------
# Model errors
# ---------------------------------------------------------------------------


class ModelError(PopsimError):
    """Raised for problems with a model's definition or evaluation."""


class ModelDefinitionError(ModelError):
    """Structural mistake in a model (bad derivative binding, name clash...)."""


class UnresolvedReferenceError(ModelError):
    """A formula or capture references a name the model does not define."""

    def __init__(self, name: str, referenced_by: Optional[str] = None):
        self.name = name
        self.referenced_by = referenced_by
        if referenced_by is None:
            message = f"Unresolved reference: '{name}'"
        else:
            message = f"Unresolved reference '{name}' in '{referenced_by}'"
        super().__init__(message)


class CyclicFormulaError(ModelError):
    """Formula evaluation re-entered a formula that was still being computed."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = tuple(cycle)
        super().__init__("Cyclic formula dependency: " + " -> ".join(self.cycle))


# ---------------------------------------------------------------------------
# Integration errors
# ---------------------------------------------------------------------------


class IntegrationError(PopsimError):
    """Raised when an integration run cannot start or cannot finish."""


class InvalidRangeError(IntegrationError, ValueError):
    def __init__(self, start: float, end: float):
        self.start = start
        self.end = end
        super().__init__(
            f"Integration range must satisfy start < end, got start={start}, end={end}"
        )


class InvalidResolutionError(IntegrationError, ValueError):
    def __init__(self, min_resolution: float, detail: str = ""):
        self.min_resolution = min_resolution
        self.detail = detail
        message = detail or f"min_resolution must be positive, got {min_resolution}"
        super().__init__(message)


class NumericalInstabilityError(IntegrationError):
    """A derivative or state value became non-finite.

    ``time`` and ``state`` describe the last valid point of the run.
    """

    def __init__(self, time: float, state: Dict[str, float], detail: str = ""):
        self.time = time
        self.state = dict(state)
        message = f"Non-finite value encountered after t={time}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class IntegrationCancelledError(IntegrationError):
    """The caller asked the run to stop. No partial trace is returned."""

    def __init__(self, time: float):
        self.time = time
        super().__init__(f"Integration cancelled at t={time}")


# ---------------------------------------------------------------------------
# Rendering errors
# ---------------------------------------------------------------------------


class RenderError(PopsimError):
    """The rendering backend could not produce an image."""
