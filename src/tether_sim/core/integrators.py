# MIT License (see LICENSE)
"""
Position integrator for the tether simulation.

Velocities are advanced by the force generators and corrected by the
constraint solver before positions move, so the position update is a
plain explicit Euler step:
    x(t+dt) = x(t) + v(t+dt) * dt

Drift from this first-order update is removed afterwards by the length
projection (constraints/projection.py).
"""
from __future__ import annotations

from ..chain import Chain
from ..types import Anchor


def euler_step(chain: Chain, anchor: Anchor, dt: float) -> None:
    """
    Move the anchor and every chain point by velocity × dt.

    Args:
        chain: Cable state, positions modified in-place.
        anchor: Satellite state, position modified in-place.
        dt: Timestep in seconds.
    """
    anchor.position += anchor.velocity * dt
    chain.positions += chain.velocities * dt


def sync_pinned(chain: Chain, anchor: Anchor) -> None:
    """Give every pinned point the anchor's velocity (rigid attachment)."""
    if chain.fixed.any():
        chain.velocities[chain.fixed] = anchor.velocity
