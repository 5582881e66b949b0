# MIT License (see LICENSE)
"""
Position-level length projection.

The velocity solver keeps links from stretching to first order only; the
explicit Euler update then lets them drift by O(dt²) per step. This pass
re-snaps every link to its natural length, holding one pin point fixed and
sweeping outwards from it in both directions.
"""
from __future__ import annotations

import numpy as np

from ..constants import DEGENERATE_LENGTH


def _sweep(positions: np.ndarray, link_length: float, indices: range, start: int) -> None:
    previous = positions[start]
    direction = None
    for i in indices:
        d = positions[i] - previous
        dist = float(np.linalg.norm(d))
        if dist >= DEGENERATE_LENGTH:
            direction = d / dist
        elif direction is None:
            # Coincident with no earlier direction to fall back on.
            previous = positions[i]
            continue
        positions[i] = previous + direction * link_length
        previous = positions[i]


def project_lengths(positions: np.ndarray, link_length: float, pin: int | None = None) -> None:
    """
    Restore every link to link_length, in place.

    Points from pin + 1 to the tip are re-placed first, each at link_length
    from its already-corrected predecessor along their current direction;
    then points pin - 1 down to 0 the same way. The pin does not move.

    Args:
        positions: Point positions (n, 3), modified in place.
        link_length: Natural link length in meters.
        pin: Index held fixed. Defaults to the middle point, n // 2.
    """
    n = len(positions)
    if n < 2:
        return
    if pin is None:
        pin = n // 2
    if not 0 <= pin < n:
        raise ValueError(f"Pin index {pin} out of range for {n} points")

    _sweep(positions, link_length, range(pin + 1, n), pin)
    _sweep(positions, link_length, range(pin - 1, -1, -1), pin)
