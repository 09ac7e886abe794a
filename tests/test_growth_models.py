import pytest

from popsim.config import ModelConfig
from popsim.model import Model, create_model, list_available_models, register_model
from popsim.simulation import integrate


def test_builtin_models_are_registered():
    available = list_available_models()
    for name in ["malthusian", "logistic", "allee", "custom"]:
        assert name in available


def test_malthusian_defaults_match_the_tutorial():
    model = create_model(ModelConfig(type="malthusian"))
    assert model.initials == {"x": 3.0}
    assert model.derivatives == {"velocity": "x"}
    assert model.evaluate(0.0)["velocity"] == pytest.approx(3.0)
    assert model.name == "malthusian"


def test_logistic_growth_rate():
    model = create_model(ModelConfig(type="logistic", parameters={"x0": 50.0}))
    values = model.evaluate(0.0)
    assert values["growth_rate"] == pytest.approx(0.35)
    assert values["velocity"] == pytest.approx(17.5)


def test_allee_rate_changes_sign_at_threshold():
    model = create_model(ModelConfig(type="allee"))
    below = model.evaluate(0.0, {"x": 15.0})["velocity"]
    between = model.evaluate(0.0, {"x": 50.0})["velocity"]
    above = model.evaluate(0.0, {"x": 120.0})["velocity"]

    assert below < 0
    assert between > 0
    assert above < 0
    assert model.evaluate(0.0, {"x": 20.0})["velocity"] == pytest.approx(0.0)


def test_parameters_initials_and_captures_can_be_overridden():
    model = create_model(
        ModelConfig(
            type="Logistic",
            name="fast",
            parameters={"g": 2.0},
            initials={"x": 10.0},
            captures=["x", "growth_rate"],
        )
    )
    assert model.name == "fast"
    assert model.initials == {"x": 10.0}
    assert model.captures == ("x", "growth_rate")
    assert model.evaluate(0.0)["g"] == 2.0


def test_custom_model_from_config():
    config = ModelConfig(
        type="custom",
        name="predator_prey",
        parameters={"birth": 0.5, "predation": 0.03, "conversion": 0.03, "death": 0.9},
        initials={"prey": 10.0, "predators": 5.0},
        formulas={
            "prey_growth": "birth*prey - predation*prey*predators",
            "predator_growth": "conversion*prey*predators - death*predators",
        },
        derivatives={"prey_growth": "prey", "predator_growth": "predators"},
        captures=["prey", "predators"],
    )
    model = create_model(config)
    rates = model.rates(0.0, model.state)
    assert rates["prey"] == pytest.approx(5.0 - 1.5)
    assert rates["predators"] == pytest.approx(1.5 - 4.5)

    trace = integrate(model, 0.0, 5.0, 0.1)
    assert min(trace.series("prey")) > 0
    assert min(trace.series("predators")) > 0


def test_unknown_model_type():
    with pytest.raises(ValueError):
        create_model(ModelConfig(type="gompertz"))


def test_register_model():
    def decay(config):
        return Model(
            initials={"x": 1.0},
            formulas={"velocity": "-x"},
            derivatives={"velocity": "x"},
            name=config.name or "decay",
        )

    register_model("Decay", decay)
    model = create_model(ModelConfig(type="decay"))
    assert model.name == "decay"

    with pytest.raises(ValueError):
        register_model("broken", "not callable")
