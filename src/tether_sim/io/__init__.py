# MIT License (see LICENSE)
"""
Input/Output utilities for tether simulations.

This subpackage provides:
    - JSON scenarios: Save and load cable configurations together with
      declarative force field and braking descriptions.
    - State export: Plain-JSON snapshots of a running cable.

Typical usage:
    from tether_sim.io import load_cable, save_scenario

    cable = load_cable("deployment.json")
    save_scenario("copy.json", cable.config, field={"type": "uniform"})
"""
from .json_io import (
    load_cable,
    load_scenario_raw,
    save_scenario,
    scenario_to_json,
    config_to_json,
    config_from_json,
    field_from_json,
    braking_from_json,
    cable_state_to_json,
)

__all__ = [
    # Loading
    "load_cable",
    "load_scenario_raw",
    # Saving
    "save_scenario",
    # Serialization
    "scenario_to_json",
    "config_to_json",
    "config_from_json",
    "field_from_json",
    "braking_from_json",
    "cable_state_to_json",
]
