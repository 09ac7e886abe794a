"""Model module for defining and creating population models."""

from .base import EvaluationScope, Model
from .factory import create_model, list_available_models, register_model
from .formulas import TIME_NAME, ExpressionFormula
from . import systems

__all__ = [
    "Model",
    "EvaluationScope",
    "ExpressionFormula",
    "TIME_NAME",
    "create_model",
    "register_model",
    "list_available_models",
    "systems",
]
