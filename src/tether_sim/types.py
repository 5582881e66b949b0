# MIT License (see LICENSE)
"""
Core type definitions for the tether simulation.

Defines:
- Anchor: the satellite body the cable pays out from.
- ForceField / BrakingProfile: the caller-supplied capabilities.

The anchor follows the same equations of motion as every chain point:
  dx/dt = v
  dv/dt = a(x) + F_brake/m
where a(x) is the field and F_brake the braking pair force.
"""
from __future__ import annotations
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from .util import vec3


# Position [m] -> acceleration-equivalent field value [m/s²].
# The value is the force per unit length divided by the linear density,
# i.e. it is applied directly as dv = field(x) * dt.
ForceField = Callable[[np.ndarray], np.ndarray]

# Deployed cable length [m] -> braking force magnitude [N].
BrakingProfile = Callable[[float], float]


def zero_field(position: np.ndarray) -> np.ndarray:
    """Field that exerts nothing anywhere."""
    return np.zeros(3, dtype=np.float64)


def no_braking(length: float) -> float:
    """Braking profile that never brakes."""
    return 0.0


@dataclass
class Anchor:
    """
    The moving body (satellite) the cable's near end is attached to.

    Attributes:
        position: Position [x, y, z] in meters.
        velocity: Velocity [vx, vy, vz] in m/s.
        mass: Mass in kg. Must be positive and finite.

    Note:
        Position and velocity are converted to float64 vectors on init
        and updated in place by the engine.
    """
    position: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    velocity: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    mass: float = 1.0

    def __post_init__(self) -> None:
        self.position = vec3(self.position)
        self.velocity = vec3(self.velocity)
        self.mass = float(self.mass)
        if not np.isfinite(self.mass) or self.mass <= 0:
            raise ValueError(f"Anchor mass must be positive and finite, got {self.mass}")

    @property
    def inv_mass(self) -> float:
        return 1.0 / self.mass

    @property
    def momentum(self) -> np.ndarray:
        return self.mass * self.velocity
