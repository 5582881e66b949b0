# MIT License (see LICENSE)
"""
JSON scenario files for tether simulations.

A scenario file carries the CableConfig plus declarative descriptions of
the force field and braking profile, which are turned into callables on
load.

JSON Schema Overview:
---------------------
{
  "anchor": {                       # Optional
    "position": [x, y, z],          # Default: [0, 0, 0]
    "velocity": [vx, vy, vz],       # Default: [0, 0, 0]
    "mass": float                   # Default: 1.30
  },
  "link_length": float,             # Either this ...
  "length": float, "points": int,   # ... or these (link_length = length / points)
  "linear_density": float,          # kg/m
  "end_mass": float,                # kg
  "deployment_velocity": [x, y, z], # m/s relative to the anchor
  "initial_points": int,            # Optional
  "initial_direction": [x, y, z],   # Optional
  "pin_anchor_point": bool,         # Optional
  "insertion": "neighbour" | "anchor",
  "max_insertions_per_step": int,
  "strict_deployment": bool,
  "tension_smoothing": float,
  "projection_pin": "anchor" | "middle",
  "field": {                        # Optional, default {"type": "none"}
    "type": "none" | "uniform" | "inverse_square",
    "g": [x, y, z],                 # If uniform
    "mu": float, "center": [x, y, z]  # If inverse_square
  },
  "braking": {                      # Optional, default {"type": "none"}
    "type": "none" | "constant" | "step",
    "force": float,                 # If constant
    "threshold": float, "braking": float, "friction": float  # If step
  }
}
"""
from __future__ import annotations
import json
from dataclasses import fields
from typing import Any

import numpy as np

from ..cable import Cable
from ..config import CableConfig
from ..constants import MU_EARTH
from ..scenarios import constant_braking, inverse_square_field, step_braking, uniform_field
from ..types import BrakingProfile, ForceField, no_braking, zero_field


_OPTION_KEYS = (
    "linear_density",
    "end_mass",
    "initial_points",
    "pin_anchor_point",
    "insertion",
    "max_insertions_per_step",
    "strict_deployment",
    "tension_smoothing",
    "projection_pin",
)


def load_scenario_raw(path: str) -> dict[str, Any]:
    """
    Load raw JSON data from a scenario file without object construction.

    Args:
        path: Absolute or relative path to the JSON file.

    Returns:
        Dictionary containing the raw JSON data.
    """
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_cable(path: str) -> Cable:
    """
    Load a scenario file and build a ready-to-step Cable.

    Raises:
        FileNotFoundError: If the file cannot be found.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If a field is missing or invalid.
    """
    data = load_scenario_raw(path)
    return Cable(
        config_from_json(data),
        field=field_from_json(data.get("field")),
        braking=braking_from_json(data.get("braking")),
    )


def config_from_json(d: dict[str, Any]) -> CableConfig:
    """
    Parse a CableConfig from a scenario dictionary.

    Unknown keys are ignored so files can carry extra metadata.
    """
    kwargs: dict[str, Any] = {}

    anchor = d.get("anchor", {})
    if "position" in anchor:
        kwargs["anchor_position"] = tuple(anchor["position"])
    if "velocity" in anchor:
        kwargs["anchor_velocity"] = tuple(anchor["velocity"])
    if "mass" in anchor:
        kwargs["anchor_mass"] = float(anchor["mass"])

    if "deployment_velocity" in d:
        kwargs["deployment_velocity"] = tuple(d["deployment_velocity"])
    if d.get("initial_direction") is not None:
        kwargs["initial_direction"] = tuple(d["initial_direction"])
    for key in _OPTION_KEYS:
        if key in d:
            kwargs[key] = d[key]

    if "link_length" in d:
        if "length" in d or "points" in d:
            raise ValueError("Give either 'link_length' or 'length' and 'points', not both")
        return CableConfig(link_length=float(d["link_length"]), **kwargs)
    if "length" in d and "points" in d:
        return CableConfig.from_total_length(float(d["length"]), d["points"], **kwargs)
    if "length" in d or "points" in d:
        raise ValueError("'length' and 'points' must be given together")
    return CableConfig(**kwargs)


def config_to_json(config: CableConfig) -> dict[str, Any]:
    """
    Serialize a CableConfig (round-trip compatible).

    Option fields equal to their defaults are left out to keep files short.
    """
    defaults = {f.name: f.default for f in fields(CableConfig)}
    result: dict[str, Any] = {
        "anchor": {
            "position": list(config.anchor_position),
            "velocity": list(config.anchor_velocity),
            "mass": config.anchor_mass,
        },
        "link_length": config.link_length,
        "linear_density": config.linear_density,
        "end_mass": config.end_mass,
        "deployment_velocity": list(config.deployment_velocity),
    }
    for key in _OPTION_KEYS:
        value = getattr(config, key)
        if key not in result and value != defaults[key]:
            result[key] = value
    if config.initial_direction is not None:
        result["initial_direction"] = list(config.initial_direction)
    return result


def field_from_json(d: dict[str, Any] | None) -> ForceField:
    """Build a force field from its declarative description."""
    if d is None:
        return zero_field
    field_type = d.get("type", "none")
    if field_type == "none":
        return zero_field
    if field_type == "uniform":
        return uniform_field(tuple(d.get("g", [0.0, -9.81, 0.0])))
    if field_type == "inverse_square":
        mu = float(d.get("mu", MU_EARTH))
        if mu < 0:
            raise ValueError(f"Field mu must be non-negative, got {mu}")
        return inverse_square_field(mu, tuple(d.get("center", [0.0, 0.0, 0.0])))
    raise ValueError(f"Unknown field type: '{field_type}'")


def braking_from_json(d: dict[str, Any] | None) -> BrakingProfile:
    """Build a braking profile from its declarative description."""
    if d is None:
        return no_braking
    braking_type = d.get("type", "none")
    if braking_type == "none":
        return no_braking
    if braking_type == "constant":
        return constant_braking(_non_negative(d["force"], "braking force"))
    if braking_type == "step":
        return step_braking(
            threshold=float(d["threshold"]),
            braking=_non_negative(d.get("braking", 0.0), "braking"),
            friction=_non_negative(d.get("friction", 0.0), "friction"),
        )
    raise ValueError(f"Unknown braking type: '{braking_type}'")


def scenario_to_json(
    config: CableConfig,
    field: dict[str, Any] | None = None,
    braking: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Combine a config with field and braking descriptions into one document.

    Field and braking are passed as their JSON descriptions since the
    callables themselves cannot be serialized.
    """
    result = config_to_json(config)
    if field is not None:
        result["field"] = dict(field)
    if braking is not None:
        result["braking"] = dict(braking)
    return result


def save_scenario(
    path: str,
    config: CableConfig,
    field: dict[str, Any] | None = None,
    braking: dict[str, Any] | None = None,
    indent: int = 2,
) -> None:
    """Save a scenario to a JSON file on disk."""
    data = scenario_to_json(config, field, braking)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent)


def cable_state_to_json(cable: Cable) -> dict[str, Any]:
    """
    Serialize the observable state of a running cable.

    Arrays become nested lists; intended for export by a driving harness.
    """
    snap = cable.snapshot()
    return {key: _to_json_value(value) for key, value in snap.items()}


def _non_negative(value: Any, name: str) -> float:
    value = float(value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def _to_json_value(value: Any) -> Any:
    """Helper: numpy arrays and scalars to plain Python values."""
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    return value
