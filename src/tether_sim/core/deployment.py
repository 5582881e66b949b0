# MIT License (see LICENSE)
"""
Deployment controller: grows the chain as cable pays out of the anchor.

Whenever the anchor has moved more than one link length away from the
anchor-adjacent point, a new point is inserted between them (at index 0),
starting at the anchor's velocity with the mass of one link of cable. The
velocity solver is rerun straight away so the new point is reconciled
with its neighbour before anything is integrated.

If the anchor outruns the cable by several link lengths in one step, a
bounded number of points is inserted and the remaining lag is reported
rather than silently absorbed.
"""
from __future__ import annotations
import warnings

import numpy as np

from ..chain import Chain
from ..constants import TENSION_SMOOTHING
from ..constraints.solver import correct_velocities
from ..errors import DeploymentLagError, DeploymentLagWarning
from ..types import Anchor


def deployment_gap(chain: Chain, anchor: Anchor) -> float:
    """Distance from the anchor to the anchor-adjacent point, in meters."""
    return float(np.linalg.norm(chain.positions[0] - anchor.position))


def insertions_needed(chain: Chain, anchor: Anchor, insertion: str = "neighbour", limit: int | None = None) -> int:
    """
    Number of insertions that would bring the gap back within one link.

    In "neighbour" mode every insertion closes one link length of gap; in
    "anchor" mode a single insertion always lands one link from the anchor.
    Counting stops at limit + 1 when a limit is given.
    """
    gap = deployment_gap(chain, anchor)
    L = chain.link_length
    if gap <= L:
        return 0
    if insertion == "anchor":
        return 1

    count = 0
    while gap > L:
        gap -= L
        count += 1
        if limit is not None and count > limit:
            break
    return count


def check_deployment_lag(
    chain: Chain,
    anchor: Anchor,
    insertion: str = "neighbour",
    max_insertions: int = 1,
    strict: bool = False,
) -> int:
    """
    Report when one step cannot insert enough points to keep up.

    Does not modify state, so the orchestrator can call it before a step.

    Raises:
        DeploymentLagError: When strict and the limit would be exceeded.

    Returns:
        Insertions required (capped at max_insertions + 1).
    """
    needed = insertions_needed(chain, anchor, insertion, limit=max_insertions)
    if needed > max_insertions:
        msg = (
            f"Anchor is {deployment_gap(chain, anchor):.6g} m from the cable at "
            f"t={chain.time:.6g}, more than {max_insertions} insertion(s) of "
            f"{chain.link_length:.6g} m can close; deployed length will lag"
        )
        if strict:
            raise DeploymentLagError(msg)
        warnings.warn(msg, DeploymentLagWarning, stacklevel=2)
    return needed


def deploy(
    chain: Chain,
    anchor: Anchor,
    dt: float,
    insertion: str = "neighbour",
    max_insertions: int = 1,
    pin: bool = False,
    smoothing: float = TENSION_SMOOTHING,
) -> int:
    """
    Insert points between the anchor and the cable while the gap exceeds a link.

    The new point lies on the segment from the anchor to the current
    anchor-adjacent point:
      - "neighbour": one link length from that point (x_a + d (1 - L/|d|))
      - "anchor": one link length from the anchor (x_a + d L/|d|). That
        closes the whole gap, so at most one point is inserted per call.

    Args:
        chain: Cable state, grown in place.
        anchor: Satellite state (read only).
        dt: Timestep in seconds, used for the tension update of the re-solve.
        insertion: Placement mode, "neighbour" or "anchor".
        max_insertions: Upper bound on points added by this call.
        pin: Pin the new anchor-adjacent point; the previous one is released.
        smoothing: Tension smoothing weight.

    Returns:
        Number of points inserted.
    """
    L = chain.link_length
    inserted = 0

    while inserted < max_insertions:
        d = chain.positions[0] - anchor.position
        gap = float(np.linalg.norm(d))
        if gap <= L:
            break

        if insertion == "neighbour":
            position = anchor.position + d * (1.0 - L / gap)
        elif insertion == "anchor":
            position = anchor.position + d * (L / gap)
        else:
            raise ValueError(f"Unknown insertion mode: '{insertion}'")

        if pin:
            chain.fixed[0] = False
        chain.insert_point(position, anchor.velocity.copy(), chain.point_mass, fixed=pin)
        correct_velocities(chain, dt, smoothing)
        inserted += 1
        if insertion == "anchor":
            break

    return inserted
