"""Built-in population models."""

from .growth import allee, custom, logistic, malthusian

__all__ = [
    "malthusian",
    "logistic",
    "allee",
    "custom",
]
