# MIT License (see LICENSE)
"""
Construction-time configuration of a cable simulation.

All values are plain numbers or tuples so a configuration can be compared,
copied and serialized (see io/json_io.py). The force field and braking
profile are callables and are passed to Cable separately.
"""
from __future__ import annotations
from dataclasses import dataclass

import numpy as np

from .constants import TENSION_SMOOTHING


INSERTION_MODES = ("neighbour", "anchor")
PROJECTION_PINS = ("anchor", "middle")


def _as_triple(value, name: str) -> tuple[float, float, float]:
    arr = np.asarray(value, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got {arr.shape[0]}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} must be finite, got {tuple(arr)}")
    return (float(arr[0]), float(arr[1]), float(arr[2]))


def _positive(value: float, name: str) -> float:
    value = float(value)
    if not np.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be positive and finite, got {value}")
    return value


@dataclass(frozen=True)
class CableConfig:
    """
    Parameters of a tether deployment.

    Attributes:
        link_length: Natural length of every link in meters (> 0).
        linear_density: Cable density in kg/m (> 0). Inserted points weigh
            linear_density * link_length.
        end_mass: Mass of the free tip in kg (> 0).
        anchor_mass: Satellite mass in kg (> 0).
        anchor_position: Initial satellite position [m].
        anchor_velocity: Initial satellite velocity [m/s].
        deployment_velocity: Initial velocity of the cable relative to the
            satellite [m/s].
        initial_points: Points in the initial discretization. 1 starts
            with the end mass at the anchor; more lay a straight cable out
            from the anchor along initial_direction.
        initial_direction: Direction of the initial straight cable. None
            uses the deployment velocity, or -y when that is zero.
        pin_anchor_point: Rigidly attach the anchor-adjacent point to the
            anchor (immovable as far as the solver is concerned).
        insertion: Where a deployed point is placed on the anchor-to-cable
            segment: "neighbour" puts it one link length from the old
            nearest point, "anchor" one link length from the anchor.
        max_insertions_per_step: Upper bound on points added per step.
        strict_deployment: Raise instead of warn when deployment lags.
        tension_smoothing: Weight of the newest sample in the exponentially
            smoothed link tensions, in (0, 1].
        projection_pin: Point held fixed by the length projection:
            "anchor" (index 0) or "middle" (n // 2).
    """
    link_length: float = 0.1
    linear_density: float = 1e-3
    end_mass: float = 0.05
    anchor_mass: float = 1.30
    anchor_position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    anchor_velocity: tuple[float, float, float] = (0.0, 0.0, 0.0)
    deployment_velocity: tuple[float, float, float] = (0.0, 0.0, 0.0)
    initial_points: int = 1
    initial_direction: tuple[float, float, float] | None = None
    pin_anchor_point: bool = False
    insertion: str = "neighbour"
    max_insertions_per_step: int = 1
    strict_deployment: bool = False
    tension_smoothing: float = TENSION_SMOOTHING
    projection_pin: str = "anchor"

    def __post_init__(self) -> None:
        """Validate and normalize every field."""
        object.__setattr__(self, "link_length", _positive(self.link_length, "link_length"))
        object.__setattr__(self, "linear_density", _positive(self.linear_density, "linear_density"))
        object.__setattr__(self, "end_mass", _positive(self.end_mass, "end_mass"))
        object.__setattr__(self, "anchor_mass", _positive(self.anchor_mass, "anchor_mass"))

        for name in ("anchor_position", "anchor_velocity", "deployment_velocity"):
            object.__setattr__(self, name, _as_triple(getattr(self, name), name))
        if self.initial_direction is not None:
            direction = _as_triple(self.initial_direction, "initial_direction")
            if not any(direction):
                raise ValueError("initial_direction must be non-zero")
            object.__setattr__(self, "initial_direction", direction)

        if int(self.initial_points) != self.initial_points or self.initial_points < 1:
            raise ValueError(f"initial_points must be an integer >= 1, got {self.initial_points}")
        object.__setattr__(self, "initial_points", int(self.initial_points))

        if int(self.max_insertions_per_step) != self.max_insertions_per_step or self.max_insertions_per_step < 1:
            raise ValueError(
                f"max_insertions_per_step must be an integer >= 1, got {self.max_insertions_per_step}"
            )
        object.__setattr__(self, "max_insertions_per_step", int(self.max_insertions_per_step))

        if self.insertion not in INSERTION_MODES:
            raise ValueError(f"Unknown insertion mode: '{self.insertion}'")
        if self.projection_pin not in PROJECTION_PINS:
            raise ValueError(f"Unknown projection pin: '{self.projection_pin}'")

        s = float(self.tension_smoothing)
        if not (0.0 < s <= 1.0):
            raise ValueError(f"tension_smoothing must lie in (0, 1], got {s}")
        object.__setattr__(self, "tension_smoothing", s)

    @classmethod
    def from_total_length(cls, length: float, points: int, **kwargs) -> CableConfig:
        """
        Build a configuration from a target cable length and point count.

        The link length is length / points, matching the discretization used
        by the deployment scenarios.
        """
        length = _positive(length, "length")
        if int(points) != points or points < 1:
            raise ValueError(f"points must be an integer >= 1, got {points}")
        return cls(link_length=length / int(points), **kwargs)

    @property
    def point_mass(self) -> float:
        """Mass of an interior (deployed) point in kg."""
        return self.linear_density * self.link_length
