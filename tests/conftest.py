from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

from popsim.config import ModelConfig
from popsim.model import Model, create_model

CONFIG_DIR = Path(__file__).resolve().parent.parent / "configs"


@pytest.fixture
def config_dir():
    return CONFIG_DIR


@pytest.fixture
def malthusian_model():
    """The tutorial's first example: x(0)=3, velocity = growth_constant*x."""
    return Model(
        initials={"x": 3},
        formulas={"growth_constant": 1, "velocity": "growth_constant*x"},
        derivatives={"velocity": "x"},
        captures=["x"],
        name="malthusian",
    )


@pytest.fixture
def logistic_model():
    def build(x0, g=0.7, k=100.0):
        return create_model(
            ModelConfig(type="logistic", parameters={"g": g, "k": k, "x0": x0})
        )

    return build
