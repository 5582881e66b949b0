import numpy as np
import pytest
from tether_sim.constants import MU_EARTH, REFERENCE_ORBIT_RADIUS
from tether_sim.scenarios import (
    circular_orbit_speed,
    deployment_velocity,
    inverse_square_field,
    orbital_tether,
    step_braking,
    uniform_field,
)


def test_uniform_field_returns_fresh_vector():
    field = uniform_field((0.0, -9.81, 0.0))
    a = field(np.zeros(3))
    a[1] = 0.0
    assert field(np.ones(3)) == pytest.approx([0.0, -9.81, 0.0])


def test_inverse_square_field():
    """a = -mu / r^2 along r; zero at the center itself."""
    field = inverse_square_field(MU_EARTH)
    r = REFERENCE_ORBIT_RADIUS
    a = field(np.array([0.0, r, 0.0]))
    assert a == pytest.approx([0.0, -MU_EARTH / r**2, 0.0])
    assert np.array_equal(field(np.zeros(3)), np.zeros(3))

    shifted = inverse_square_field(1.0, center=(1.0, 0.0, 0.0))
    assert shifted(np.array([3.0, 0.0, 0.0])) == pytest.approx([-0.25, 0.0, 0.0])


def test_step_braking():
    profile = step_braking(threshold=100.0, braking=1.0, friction=0.2)
    assert profile(50.0) == pytest.approx(0.2)
    assert profile(100.0) == pytest.approx(1.2)
    assert profile(150.0) == pytest.approx(1.2)


def test_deployment_velocity_angles():
    """-y rotated about z by angle_x, then about x by angle_y, times speed."""
    assert deployment_velocity(0, 0) == pytest.approx([0.0, -10.0, 0.0])
    assert deployment_velocity(90, 0) == pytest.approx([10.0, 0.0, 0.0], abs=1e-12)
    assert deployment_velocity(0, 90, speed=2.0) == pytest.approx([0.0, 0.0, -2.0], abs=1e-12)
    assert deployment_velocity(np.pi, 0, degrees=False) == pytest.approx([0.0, 10.0, 0.0], abs=1e-12)


def test_circular_orbit_speed():
    """~400 km orbit: v = sqrt(mu / r) ~ 7.67 km/s."""
    v = circular_orbit_speed(REFERENCE_ORBIT_RADIUS)
    assert v == pytest.approx(7672.6, rel=1e-4)


def test_orbital_tether_setup():
    cable = orbital_tether(points=100)
    v_orbit = circular_orbit_speed(REFERENCE_ORBIT_RADIUS)

    assert cable.n_points == 1
    assert cable.config.link_length == pytest.approx(1.0)
    assert cable.anchor.mass == pytest.approx(1.30)
    assert cable.anchor_position == pytest.approx([0.0, REFERENCE_ORBIT_RADIUS, 0.0])
    assert cable.anchor_velocity == pytest.approx([v_orbit, 0.0, 0.0])
    # End mass leaves straight down at 10 m/s relative to the satellite
    assert cable.velocities[0] == pytest.approx([v_orbit, -10.0, 0.0])
    assert cable.braking(50.0) == 0.0
    assert cable.braking(100.0) == pytest.approx(1.0)


def test_orbital_tether_deploys():
    cable = orbital_tether(points=1000, deployment_angle=(20.0, 10.0))

    cable.run(duration=0.5, dt=1e-3)

    # 10 m/s for 0.5 s is ~5 m of cable in 0.1 m links
    print("points", cable.n_points, "length", cable.length)
    assert 30 <= cable.n_points <= 60
    assert cable.max_length_error() < 1e-6
    assert np.all(np.isfinite(cable.tensions))
    altitude = cable.midpoint_altitude()
    assert 3.9e5 < altitude < 4.01e5
