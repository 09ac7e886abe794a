"""Factory functions for creating models."""

from typing import Callable, Dict

from .base import Model
from .systems import allee, custom, logistic, malthusian
from ..config.schemas import ModelConfig

ModelBuilder = Callable[[ModelConfig], Model]

# Registry of available models
MODEL_REGISTRY: Dict[str, ModelBuilder] = {
    "malthusian": malthusian,
    "exponential": malthusian,  # Alias
    "logistic": logistic,
    "allee": allee,
    "custom": custom,
}


def create_model(config: ModelConfig) -> Model:
    """
    Create a model from configuration.

    Args:
        config: Configuration specifying the model type and parameters

    Returns:
        Constructed model

    Raises:
        ValueError: If model type is not recognized
    """
    model_type = config.type.lower()

    if model_type not in MODEL_REGISTRY:
        available_types = list(MODEL_REGISTRY.keys())
        raise ValueError(
            f"Unknown model type: {config.type}. "
            f"Available types: {available_types}"
        )

    return MODEL_REGISTRY[model_type](config)


def register_model(name: str, builder: ModelBuilder) -> None:
    """
    Register a new model type.

    Args:
        name: Name to register the model under
        builder: Callable taking a ModelConfig and returning a Model
    """
    if not callable(builder):
        raise ValueError("builder must be callable")

    MODEL_REGISTRY[name.lower()] = builder


def list_available_models() -> Dict[str, ModelBuilder]:
    """
    Get a dictionary of all available model types.

    Returns:
        Dictionary mapping model names to builders
    """
    return MODEL_REGISTRY.copy()
