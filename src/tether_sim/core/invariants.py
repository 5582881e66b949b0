# MIT License (see LICENSE)
"""
Utilities for calculating physical invariants and diagnostics.

Used for verifying simulation correctness and debugging stability issues.
Without field or braking, the constraint solver conserves linear momentum
exactly and never adds kinetic energy; the length projection keeps every
link at its natural length.
"""
from __future__ import annotations
import warnings

import numpy as np

from ..chain import Chain
from ..constants import STANDARD_GRAVITY
from ..types import Anchor


def kinetic_energy(chain: Chain) -> float:
    """
    Total kinetic energy of the chain points.

    T = Σ 0.5 * m * v²

    Returns:
        Kinetic energy in Joules.
    """
    v_sq = np.einsum("ij,ij->i", chain.velocities, chain.velocities)
    return float(0.5 * np.dot(chain.masses, v_sq))


def potential_energy(chain: Chain, g: float = STANDARD_GRAVITY) -> float:
    """Uniform-gravity potential Σ m g y, with y the second coordinate."""
    return float(g * np.dot(chain.masses, chain.positions[:, 1]))


def total_energy(chain: Chain, g: float = STANDARD_GRAVITY) -> float:
    """
    Energy diagnostic for regression testing.

    E = Σ m (0.5 v² + g y) over all chain points.
    """
    return kinetic_energy(chain) + potential_energy(chain, g)


def linear_momentum(chain: Chain, anchor: Anchor | None = None) -> np.ndarray:
    """
    Total linear momentum of the chain, plus the anchor if given.

    P = Σ m v

    Returns:
        Momentum vector [Px, Py, Pz] in kg·m/s.
    """
    p = chain.masses @ chain.velocities
    if anchor is not None:
        p = p + anchor.momentum
    return p


def length_errors(chain: Chain) -> np.ndarray:
    """Per-link deviation from the natural length, relative to it."""
    return (chain.link_lengths() - chain.link_length) / chain.link_length


def max_length_error(chain: Chain) -> float:
    """Largest relative link length deviation (0 for a single point)."""
    if chain.n_links == 0:
        return 0.0
    return float(np.max(np.abs(length_errors(chain))))


def check_finite_state(chain: Chain, anchor: Anchor) -> bool:
    """
    Check that no position, velocity or tension has gone non-finite.

    Issues a RuntimeWarning naming the offending arrays and returns False
    when the state is corrupt.
    """
    bad = [
        name for name, arr in (
            ("positions", chain.positions),
            ("velocities", chain.velocities),
            ("tensions", chain.tensions),
            ("anchor position", anchor.position),
            ("anchor velocity", anchor.velocity),
        )
        if not np.all(np.isfinite(arr))
    ]
    if bad:
        warnings.warn(
            f"Non-finite simulation state at t={chain.time:.6g}: {', '.join(bad)}",
            RuntimeWarning,
            stacklevel=2,
        )
        return False
    return True
