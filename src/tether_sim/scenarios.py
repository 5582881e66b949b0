# MIT License (see LICENSE)
"""
Stock force fields, braking profiles and ready-made deployments.

Fields return acceleration-equivalent values (see types.ForceField), so
inverse_square_field is simply gravitational acceleration.

The orbital scenario reproduces the reference tether experiment: a
1.3 kg satellite in a circular ~400 km orbit deploys 100 m of 1 g/m cable
with a 50 g end mass at 10 m/s, braking with 1 N once the full length is
out.
"""
from __future__ import annotations

import numpy as np

from .cable import Cable
from .config import CableConfig
from .constants import MU_EARTH, REFERENCE_ORBIT_RADIUS
from .profiler import Profiler
from .types import BrakingProfile, ForceField
from .util import norm2, rotation_matrix, vec3


def uniform_field(g=(0.0, -9.81, 0.0)) -> ForceField:
    """Constant field, e.g. surface gravity."""
    g = vec3(g)

    def field(position: np.ndarray) -> np.ndarray:
        return g.copy()

    return field


def inverse_square_field(mu: float = MU_EARTH, center=(0.0, 0.0, 0.0)) -> ForceField:
    """
    Point-mass gravity: a = -μ r̂ / |r|².

    Returns zero at the center itself.
    """
    c = vec3(center)

    def field(position: np.ndarray) -> np.ndarray:
        r = position - c
        r2 = norm2(r)
        if r2 == 0.0:
            return np.zeros(3)
        return (-mu / (r2 * np.sqrt(r2))) * r

    return field


def step_braking(threshold: float, braking: float, friction: float = 0.0) -> BrakingProfile:
    """
    Deployment friction, plus braking once the cable is long enough.

    Returns friction below `threshold` meters deployed and
    friction + braking at or above it.
    """
    def profile(length: float) -> float:
        if length < threshold:
            return friction
        return friction + braking

    return profile


def constant_braking(force: float) -> BrakingProfile:
    """The same braking force at every length."""
    def profile(length: float) -> float:
        return force

    return profile


def deployment_velocity(angle_x: float = 0.0, angle_y: float = 0.0, speed: float = 10.0, degrees: bool = True) -> np.ndarray:
    """
    Deployment velocity from two angles.

    Starts straight down (-y), rotates by angle_x about z (in the viewing
    plane) and then by angle_y about x (into the screen), and scales by
    speed.
    """
    if degrees:
        angle_x, angle_y = np.radians(angle_x), np.radians(angle_y)
    direction = np.array([0.0, -1.0, 0.0])
    direction = rotation_matrix((0.0, 0.0, 1.0), angle_x) @ direction
    direction = rotation_matrix((1.0, 0.0, 0.0), angle_y) @ direction
    return direction * speed


def circular_orbit_speed(radius: float, mu: float = MU_EARTH) -> float:
    """Speed of a circular orbit of the given radius, sqrt(μ / r)."""
    return float(np.sqrt(mu / radius))


def orbital_tether(
    length: float = 100.0,
    density: float = 1e-3,
    points: int = 1000,
    deployment_angle: tuple[float, float] = (0.0, 0.0),
    deployment_speed: float = 10.0,
    end_mass: float = 0.05,
    sat_mass: float = 1.30,
    friction: float = 0.0,
    braking_force: float = 1.0,
    orbit_radius: float = REFERENCE_ORBIT_RADIUS,
    mu: float = MU_EARTH,
    profiler: Profiler | None = None,
    **options,
) -> Cable:
    """
    Tether deployed from a satellite in circular orbit.

    The satellite starts at (0, orbit_radius, 0) moving along +x at orbital
    speed. Points are length / points apart. Braking (on top of friction)
    starts once `length` meters are deployed.

    Args:
        length: Target cable length [m].
        density: Linear density [kg/m].
        points: Number of points over the target length.
        deployment_angle: (angle_x, angle_y) in degrees, see deployment_velocity.
        deployment_speed: Deployment speed relative to the satellite [m/s].
        end_mass: Tip mass [kg].
        sat_mass: Satellite mass [kg].
        friction: Deployment friction force [N].
        braking_force: Braking force beyond the target length [N].
        orbit_radius: Orbit radius [m].
        mu: Gravitational parameter [m³/s²].
        profiler: Optional profiler for the cable.
        **options: Extra CableConfig fields (insertion, max_insertions_per_step, ...).
    """
    config = CableConfig.from_total_length(
        length,
        points,
        linear_density=density,
        end_mass=end_mass,
        anchor_mass=sat_mass,
        anchor_position=(0.0, orbit_radius, 0.0),
        anchor_velocity=(circular_orbit_speed(orbit_radius, mu), 0.0, 0.0),
        deployment_velocity=tuple(deployment_velocity(*deployment_angle, speed=deployment_speed)),
        **options,
    )
    return Cable(
        config,
        field=inverse_square_field(mu),
        braking=step_braking(length, braking_force, friction),
        profiler=profiler,
    )
