# MIT License (see LICENSE)
"""
Force generators for the tether simulation.

Both generators act directly on velocities (impulse = force × dt) since
the engine integrates with a fixed explicit step:

- apply_field: the external field on every free point and the anchor.
- apply_braking: deployment friction/braking between the anchor and the
  anchor-adjacent point, applied as an equal and opposite pair so the
  total momentum is unchanged.
"""
from __future__ import annotations

import numpy as np

from ..chain import Chain
from ..constants import CONTACT_EPS_SQ
from ..types import Anchor, ForceField, BrakingProfile
from ..util import norm2, unit, vec3


def apply_field(chain: Chain, anchor: Anchor, field: ForceField, dt: float) -> None:
    """
    Accelerate the anchor and every free chain point by the field.

    Implements dv = field(x) * dt. Pinned points are skipped; they take
    their velocity from the anchor.

    Args:
        chain: Cable state, velocities modified in-place.
        anchor: Satellite state, velocity modified in-place.
        field: Position -> acceleration-equivalent field value.
        dt: Timestep in seconds.
    """
    anchor.velocity += vec3(field(anchor.position)) * dt

    for i in range(chain.n_points):
        if chain.fixed[i]:
            continue
        chain.velocities[i] += vec3(field(chain.positions[i])) * dt


def apply_braking(chain: Chain, anchor: Anchor, profile: BrakingProfile, dt: float) -> np.ndarray:
    """
    Resist the cable being pulled out of the anchor.

    The braking magnitude comes from profile(deployed length). The force
    acts on the anchor-adjacent point (index 0) and, reversed, on the
    anchor. Nothing happens while that point is pinned to the anchor.
    With d = x_0 - x_anchor and u = v_0 - v_anchor:
      - touching (|d|² < eps) and moving apart: opposes the relative velocity
      - separating (u · d > 0): opposes the separation direction
      - approaching: no force; braking never reels the cable back in

    Args:
        chain: Cable state, velocity of point 0 modified in-place.
        anchor: Satellite state, velocity modified in-place.
        profile: Deployed length -> braking force magnitude [N].
        dt: Timestep in seconds.

    Returns:
        The force applied to point 0 [N] (zero vector when inactive).
    """
    magnitude = float(profile(chain.length))
    if magnitude == 0.0 or chain.fixed[0]:
        return np.zeros(3)

    separation = chain.positions[0] - anchor.position
    relative_velocity = chain.velocities[0] - anchor.velocity

    if norm2(separation) < CONTACT_EPS_SQ:
        if norm2(relative_velocity) < CONTACT_EPS_SQ:
            return np.zeros(3)
        direction = unit(relative_velocity)
    elif float(np.dot(relative_velocity, separation)) > 0.0:
        direction = unit(separation)
    else:
        return np.zeros(3)

    force = -magnitude * direction

    # Newton's third law
    chain.velocities[0] += force * (dt / chain.masses[0])
    anchor.velocity -= force * (dt * anchor.inv_mass)
    return force
