# MIT License (see LICENSE)
"""
Inextensibility solvers for the cable chain.

Every link imposes one scalar velocity constraint: the relative velocity of
its two points, projected on the link direction R_i, must vanish. With
per-link impulses J_i (positive pulls the pair together) the constraints
form a symmetric tridiagonal system

    J_i (1/m_i + 1/m_{i+1}) - J_{i-1} cos_i / m_i - J_{i+1} cos_{i+1} / m_{i+1} = V_i

where V_i = R_i · (v_{i+1} - v_i) and cos_i = R_{i-1} · R_i is the bend at
point i.

Two solvers are provided:
- solve_chain_velocities: exact O(n) elimination. Effective masses M (from
  the tip side) and N (from the anchor side) summarize the rest of the
  chain; an isolated impulse I_i per link is then corrected by one forward
  and one backward cascade, giving J with no iteration.
- solve_chain_velocities_gs: naive sequential-impulse (Gauss-Seidel)
  relaxation of the same constraints, kept as a reference.

All sweeps work with inverse masses so that pinned points (inverse mass 0)
short-circuit every formula instead of going through inf/inf.
"""
from __future__ import annotations

import numpy as np

from ..chain import Chain
from ..constants import DEGENERATE_LENGTH, TENSION_SMOOTHING
from ..util import inverse_masses, unit_rows


def _in_series(w_a: float, w_b: float) -> float:
    """
    Inverse mass of two masses moving as one: 1 / (m_a + m_b).

    Zero when both are immovable.
    """
    s = w_a + w_b
    if s <= 0.0:
        return 0.0
    return w_a * w_b / s


def _share(w_a: float, w_b: float) -> float:
    """m_b / (m_a + m_b) in inverse-mass form; zero when a is immovable."""
    s = w_a + w_b
    if w_a <= 0.0 or s <= 0.0:
        return 0.0
    return w_a / s


def link_directions(positions: np.ndarray) -> np.ndarray:
    """Unit vectors from point i to i+1; zero rows for coincident points."""
    return unit_rows(np.diff(positions, axis=0), eps=DEGENERATE_LENGTH)


def separating_velocities(positions: np.ndarray, velocities: np.ndarray) -> np.ndarray:
    """Per-link relative velocity along the link. Positive means stretching."""
    R = link_directions(positions)
    return np.einsum("ij,ij->i", R, velocities[1:] - velocities[:-1])


def solve_chain_velocities(
    positions: np.ndarray,
    velocities: np.ndarray,
    masses: np.ndarray,
    fixed: np.ndarray | None = None,
) -> np.ndarray:
    """
    Remove the stretching component of every link's relative velocity.

    Solves the chain constraint system exactly in four O(n) passes and
    applies the impulses to `velocities` in place.

    Args:
        positions: Point positions (n, 3). Only directions are used.
        velocities: Point velocities (n, 3), modified in place.
        masses: Point masses (n,).
        fixed: Optional pinned-point tags (n,).

    Returns:
        Per-link impulses J (n - 1,) in N·s. Positive J pulls the link's
        points towards each other.
    """
    n = len(positions)
    if n < 2:
        return np.zeros(0)

    w = inverse_masses(masses, fixed)
    R = link_directions(positions)
    n_links = n - 1

    # cos[i] is the bend at point i; the end points have a single link.
    cos = np.zeros(n)
    cos[1:-1] = np.einsum("ij,ij->i", R[:-1], R[1:])
    cos2 = np.minimum(cos * cos, 1.0)

    # Effective inverse mass of point i pulled from its anchor side, with
    # everything towards the tip accounted for (1/M in the recurrence).
    inv_M = np.zeros(n)
    inv_M[-1] = w[-1]
    for i in range(n - 2, 0, -1):
        inv_M[i] = cos2[i] * _in_series(w[i], inv_M[i + 1]) + (1.0 - cos2[i]) * w[i]

    # Same, pulled from the tip side, everything towards the anchor (1/N).
    inv_N = np.zeros(n)
    inv_N[0] = w[0]
    for i in range(1, n - 1):
        inv_N[i] = cos2[i] * _in_series(w[i], inv_N[i - 1]) + (1.0 - cos2[i]) * w[i]

    V = np.einsum("ij,ij->i", R, velocities[1:] - velocities[:-1])

    # Impulse that would zero V[i] if link i were alone.
    denom = inv_N[:-1] + inv_M[1:]
    I = np.zeros(n_links)
    movable = denom > 0.0
    I[movable] = V[movable] / denom[movable]

    J = I.copy()

    # Contributions of lower-index impulses, carried across point i.
    # (1 - m_i/M_i) / cos_i simplifies to cos_i * M_{i+1} / (m_i + M_{i+1}).
    extra = 0.0
    for i in range(1, n_links):
        extra = (I[i - 1] + extra) * cos[i] * _share(w[i], inv_M[i + 1])
        J[i] += extra

    # Contributions of higher-index impulses, carried across point i + 1.
    extra = 0.0
    for i in range(n_links - 2, -1, -1):
        extra = (I[i + 1] + extra) * cos[i + 1] * _share(w[i + 1], inv_N[i])
        J[i] += extra

    impulse = J[:, None] * R
    dv = np.zeros_like(velocities)
    dv[:-1] += impulse
    dv[1:] -= impulse
    velocities += dv * w[:, None]

    return J


def solve_chain_velocities_gs(
    positions: np.ndarray,
    velocities: np.ndarray,
    masses: np.ndarray,
    fixed: np.ndarray | None = None,
    iters: int = 10000,
    tol: float = 1e-12,
) -> np.ndarray:
    """
    Reference solver: sequential impulses swept link by link until converged.

    Each pass visits every link once and applies the impulse that zeroes its
    current separating velocity, which is Gauss-Seidel on the chain system.
    Converges to the same impulses as solve_chain_velocities, at O(n) per
    pass and many passes for long chains.

    Args:
        positions: Point positions (n, 3).
        velocities: Point velocities (n, 3), modified in place.
        masses: Point masses (n,).
        fixed: Optional pinned-point tags (n,).
        iters: Maximum number of passes.
        tol: Stop once every |V_i| seen in a pass is below this.

    Returns:
        Accumulated per-link impulses (n - 1,).
    """
    n = len(positions)
    if n < 2:
        return np.zeros(0)

    w = inverse_masses(masses, fixed)
    R = link_directions(positions)
    J = np.zeros(n - 1)

    for _ in range(iters):
        worst = 0.0
        for i in range(n - 1):
            k = w[i] + w[i + 1]
            if k < 1e-15:
                continue

            vn = float(np.dot(R[i], velocities[i + 1] - velocities[i]))
            dlambda = vn / k

            J[i] += dlambda
            velocities[i] += dlambda * w[i] * R[i]
            velocities[i + 1] -= dlambda * w[i + 1] * R[i]
            worst = max(worst, abs(vn))

        if worst < tol:
            break

    return J


def update_tensions(
    tensions: np.ndarray,
    impulses: np.ndarray,
    dt: float,
    smoothing: float = TENSION_SMOOTHING,
) -> None:
    """
    Fold one impulse sample into the smoothed link tensions, in place.

    tension <- tension * (1 - s) + (J / dt) * s
    """
    tensions *= 1.0 - smoothing
    tensions += impulses * (smoothing / dt)


def correct_velocities(chain: Chain, dt: float, smoothing: float = TENSION_SMOOTHING) -> np.ndarray:
    """
    Run the chain solver on a Chain and update its tension estimates.

    Returns:
        The per-link impulses applied.
    """
    if chain.n_points < 2:
        return np.zeros(0)
    J = solve_chain_velocities(chain.positions, chain.velocities, chain.masses, chain.fixed)
    update_tensions(chain.tensions, J, dt, smoothing)
    return J
