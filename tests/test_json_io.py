import json

import numpy as np
import pytest
from tether_sim.config import CableConfig
from tether_sim.io.json_io import (
    braking_from_json,
    cable_state_to_json,
    config_from_json,
    config_to_json,
    field_from_json,
    load_cable,
    load_scenario_raw,
    save_scenario,
)


def test_config_round_trip():
    config = CableConfig(
        link_length=0.2,
        linear_density=2e-3,
        anchor_position=(1.0, 2.0, 3.0),
        anchor_velocity=(7.0, 0.0, 0.0),
        deployment_velocity=(0.0, -10.0, 0.0),
        initial_points=4,
        initial_direction=(1.0, 0.0, 0.0),
        insertion="anchor",
        max_insertions_per_step=3,
        tension_smoothing=0.5,
    )
    data = config_to_json(config)

    # Plain JSON all the way down
    restored = config_from_json(json.loads(json.dumps(data)))
    assert restored == config


def test_defaults_are_not_written():
    data = config_to_json(CableConfig())
    assert "insertion" not in data
    assert "strict_deployment" not in data
    assert data["link_length"] == 0.1


def test_save_and_load_cable(tmp_path):
    config = CableConfig(link_length=0.05, deployment_velocity=(0.0, -1.0, 0.0))
    p = tmp_path / "scenario.json"
    save_scenario(
        str(p), config,
        field={"type": "uniform", "g": [0.0, -9.81, 0.0]},
        braking={"type": "step", "threshold": 1.0, "braking": 0.5, "friction": 0.1},
    )

    raw = load_scenario_raw(str(p))
    assert raw["field"]["type"] == "uniform"

    cable = load_cable(str(p))
    assert cable.config == config
    assert cable.field(np.zeros(3)) == pytest.approx([0.0, -9.81, 0.0])
    assert cable.braking(0.5) == pytest.approx(0.1)
    assert cable.braking(1.0) == pytest.approx(0.6)

    cable.step(1e-3)
    assert cable.time == pytest.approx(1e-3)


def test_length_and_points_form():
    config = config_from_json({"length": 100.0, "points": 1000, "end_mass": 0.05})
    assert config.link_length == pytest.approx(0.1)

    with pytest.raises(ValueError):
        config_from_json({"length": 100.0})
    with pytest.raises(ValueError):
        config_from_json({"link_length": 0.1, "points": 10})


def test_invalid_values_raise():
    with pytest.raises(ValueError):
        config_from_json({"link_length": -0.1})
    with pytest.raises(ValueError):
        config_from_json({"insertion": "sideways"})
    with pytest.raises(ValueError):
        field_from_json({"type": "magnetic"})
    with pytest.raises(ValueError):
        field_from_json({"type": "inverse_square", "mu": -1.0})
    with pytest.raises(ValueError):
        braking_from_json({"type": "constant", "force": -2.0})
    with pytest.raises(ValueError):
        braking_from_json({"type": "exponential"})


def test_declarative_field_and_braking():
    assert field_from_json(None)(np.ones(3)) == pytest.approx([0.0, 0.0, 0.0])

    gravity = field_from_json({"type": "inverse_square", "mu": 4.0, "center": [0.0, 0.0, 0.0]})
    assert gravity(np.array([2.0, 0.0, 0.0])) == pytest.approx([-1.0, 0.0, 0.0])

    assert braking_from_json(None)(10.0) == 0.0
    assert braking_from_json({"type": "constant", "force": 1.5})(0.0) == 1.5


def test_cable_state_to_json(tmp_path):
    cable = _load_cable_from_dict(tmp_path, {
        "link_length": 0.1,
        "initial_points": 3,
        "initial_direction": [0.0, -1.0, 0.0],
    })
    state = cable_state_to_json(cable)

    text = json.dumps(state)
    assert json.loads(text)["n_points"] == 3
    assert state["positions"][2] == pytest.approx([0.0, -0.2, 0.0])
    assert state["fixed"] == [False, False, False]


def _load_cable_from_dict(tmp_path, data):
    p = tmp_path / "cable.json"
    p.write_text(json.dumps(data), encoding="utf-8")
    return load_cable(str(p))
