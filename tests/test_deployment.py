import numpy as np
import pytest
from tether_sim.cable import Cable
from tether_sim.chain import Chain
from tether_sim.config import CableConfig
from tether_sim.core.deployment import check_deployment_lag, deploy, insertions_needed
from tether_sim.errors import DeploymentLagError, DeploymentLagWarning
from tether_sim.types import Anchor


def _single_point(x=0.0):
    return Chain(
        positions=[(x, 0.0, 0.0)],
        velocities=[(0.0, 0.0, 0.0)],
        masses=[0.05],
        link_length=0.1,
        linear_density=1e-3,
    )


def test_neighbour_insertion_distance():
    """
    Anchor 0.25 m from a lone tip, L = 0.1:
      the new point lands one link length from the tip, at x = 0.1.
    """
    chain = _single_point()
    anchor = Anchor(position=(0.25, 0.0, 0.0), velocity=(1.0, 0.0, 0.0), mass=1.3)

    inserted = deploy(chain, anchor, dt=0.01, insertion="neighbour", max_insertions=1)

    assert inserted == 1
    assert chain.n_points == 2
    assert chain.positions[0] == pytest.approx([0.1, 0.0, 0.0])
    assert np.linalg.norm(chain.positions[0] - chain.positions[1]) == pytest.approx(0.1)
    assert chain.masses[0] == pytest.approx(1e-4)
    assert chain.tensions.shape == (1,)


def test_anchor_insertion_distance():
    """Anchor mode: the new point lands one link length from the anchor."""
    chain = _single_point()
    anchor = Anchor(position=(0.25, 0.0, 0.0), mass=1.3)

    inserted = deploy(chain, anchor, dt=0.01, insertion="anchor", max_insertions=1)

    assert inserted == 1
    assert chain.positions[0] == pytest.approx([0.15, 0.0, 0.0])
    assert np.linalg.norm(chain.positions[0] - anchor.position) == pytest.approx(0.1)


def test_neighbour_mode_closes_gap_link_by_link():
    chain = _single_point()
    anchor = Anchor(position=(0.25, 0.0, 0.0), mass=1.3)

    inserted = deploy(chain, anchor, dt=0.01, insertion="neighbour", max_insertions=5)

    assert inserted == 2
    assert chain.positions[:, 0] == pytest.approx([0.2, 0.1, 0.0])
    assert np.linalg.norm(chain.positions[0] - anchor.position) <= chain.link_length


def test_no_insertion_within_one_link():
    chain = _single_point()
    anchor = Anchor(position=(0.05, 0.0, 0.0), mass=1.3)
    assert deploy(chain, anchor, dt=0.01) == 0
    assert chain.n_points == 1


def test_new_point_takes_anchor_velocity_and_is_reconciled():
    """
    The new point starts at the anchor's velocity and is immediately
    re-solved against the tip, so the fresh link is not stretching.
    """
    chain = _single_point()
    anchor = Anchor(position=(0.15, 0.0, 0.0), velocity=(1.0, 0.0, 0.0), mass=1.3)
    p_expected = chain.masses[0] * chain.velocities[0] + 1e-4 * anchor.velocity

    deploy(chain, anchor, dt=0.01)

    assert chain.masses @ chain.velocities == pytest.approx(p_expected)
    v_rel = chain.velocities[1] - chain.velocities[0]
    R = chain.positions[1] - chain.positions[0]
    assert np.dot(v_rel, R) == pytest.approx(0.0, abs=1e-12)


def test_pinned_deployment_moves_the_pin():
    chain = _single_point()
    chain.fixed[0] = True
    anchor = Anchor(position=(0.15, 0.0, 0.0), mass=1.3)

    deploy(chain, anchor, dt=0.01, pin=True)

    assert chain.fixed.tolist() == [True, False]


def test_insertions_needed():
    chain = _single_point()
    anchor = Anchor(position=(0.35, 0.0, 0.0), mass=1.3)
    assert insertions_needed(chain, anchor, "neighbour") == 3
    assert insertions_needed(chain, anchor, "neighbour", limit=1) == 2
    assert insertions_needed(chain, anchor, "anchor") == 1


def test_lag_check_warns_without_mutation():
    chain = _single_point()
    anchor = Anchor(position=(1.0, 0.0, 0.0), mass=1.3)

    with pytest.warns(DeploymentLagWarning):
        needed = check_deployment_lag(chain, anchor, max_insertions=1)

    assert needed == 2
    assert chain.n_points == 1


def test_cable_step_warns_on_lag():
    chain = _single_point()
    anchor = Anchor(position=(1.0, 0.0, 0.0), mass=1.3)
    cable = Cable.from_state(chain, anchor)

    with pytest.warns(DeploymentLagWarning):
        cable.step(0.01)

    # Still inserts what it can
    assert cable.n_points == 2


def test_cable_step_strict_lag_raises_before_mutation():
    chain = _single_point()
    anchor = Anchor(position=(1.0, 0.0, 0.0), velocity=(1.0, 0.0, 0.0), mass=1.3)
    cable = Cable.from_state(chain, anchor, config=CableConfig(strict_deployment=True))
    before = cable.snapshot()

    with pytest.raises(DeploymentLagError):
        cable.step(0.01)

    after = cable.snapshot()
    assert after["time"] == before["time"]
    assert after["n_points"] == 1
    assert np.array_equal(after["positions"], before["positions"])
    assert np.array_equal(after["anchor_position"], before["anchor_position"])


def test_higher_insertion_limit_keeps_up():
    chain = _single_point()
    anchor = Anchor(position=(0.35, 0.0, 0.0), mass=1.3)
    cable = Cable.from_state(chain, anchor, config=CableConfig(max_insertions_per_step=4))

    cable.step(1e-3)

    assert cable.n_points == 4
    assert cable.last_inserted == 3


@pytest.mark.parametrize("seed", range(5))
def test_anchor_mode_inserts_one_point_per_call(seed):
    """
    Anchor mode closes the whole gap with its first point, so a higher
    insertion limit must not stack further points on top of it.
    """
    rng = np.random.default_rng(seed)
    direction = rng.normal(size=3)
    direction /= np.linalg.norm(direction)
    gap = rng.uniform(0.1001, 0.5)
    chain = _single_point()
    anchor = Anchor(position=gap * direction, mass=1.3)

    inserted = deploy(chain, anchor, dt=0.01, insertion="anchor", max_insertions=4)

    assert inserted == 1
    assert chain.n_points == 2
    assert np.linalg.norm(chain.positions[0] - anchor.position) == pytest.approx(0.1)
    assert chain.link_lengths().min() > 1e-9
    assert np.all(np.isfinite(chain.velocities))


def test_anchor_mode_cable_with_insertion_limit():
    chain = _single_point()
    anchor = Anchor(position=(0.35, 0.0, 0.0), mass=1.3)
    config = CableConfig(insertion="anchor", max_insertions_per_step=4)
    cable = Cable.from_state(chain, anchor, config=config)

    cable.step(1e-3)

    assert cable.last_inserted == 1
    assert cable.n_points == 2
    assert cable.chain.link_lengths().min() > 0.05
    assert cable.max_length_error() < 1e-9
    assert np.all(np.isfinite(cable.tensions))


def test_deployment_grows_monotonically():
    """
    Satellite moving at 1 m/s away from a tip at rest:
      the point count never drops, length is n L, one tension per link.
    """
    config = CableConfig(
        link_length=0.1,
        anchor_velocity=(1.0, 0.0, 0.0),
        deployment_velocity=(-1.0, 0.0, 0.0),
    )
    cable = Cable(config)

    counts = []
    for _ in range(200):
        cable.step(0.01)
        counts.append(cable.n_points)
        assert cable.tensions.shape == (cable.n_points - 1,)
        assert cable.length == pytest.approx(cable.n_points * 0.1)

    print("points over time", counts[::20])
    assert all(b >= a for a, b in zip(counts, counts[1:]))
    assert counts[-1] > 10
    assert cable.max_length_error() < 1e-9
    assert np.all(np.isfinite(cable.positions))
