# MIT License (see LICENSE)
"""
The discretized cable: an ordered chain of point masses.

Point 0 is the anchor-adjacent point and the last point is the free tip
carrying the end mass. Link i joins point i to point i+1 and carries a
smoothed tension estimate. New points are only ever inserted at index 0,
as cable pays out from the anchor; nothing is ever removed.

State is held as parallel numpy arrays. Insertion reallocates them, so
code outside a step must not keep references to the arrays across steps.
"""
from __future__ import annotations
from dataclasses import dataclass

import numpy as np

from .util import f64, inverse_masses, vec3, unit


@dataclass
class Chain:
    """
    Mutable state of the cable.

    Attributes:
        positions: Point positions, shape (n, 3), in meters.
        velocities: Point velocities, shape (n, 3), in m/s.
        masses: Point masses, shape (n,), in kg. Positive and finite.
        link_length: Natural length shared by every link, in meters.
        linear_density: Cable density in kg/m.
        fixed: Pinned-point tags, shape (n,). A pinned point has zero
            inverse mass and is never moved by impulses.
        tensions: Smoothed link tensions, shape (n - 1,), in N.
            Positive means the link is pulling its points together.
        time: Simulated time in seconds.
    """
    positions: np.ndarray
    velocities: np.ndarray
    masses: np.ndarray
    link_length: float
    linear_density: float
    fixed: np.ndarray | None = None
    tensions: np.ndarray | None = None
    time: float = 0.0

    def __post_init__(self) -> None:
        self.positions = f64(self.positions).reshape(-1, 3)
        self.velocities = f64(self.velocities).reshape(-1, 3)
        self.masses = f64(self.masses).reshape(-1)
        n = len(self.positions)

        if n < 1:
            raise ValueError("A chain needs at least one point")
        if self.velocities.shape != (n, 3) or self.masses.shape != (n,):
            raise ValueError(
                f"Inconsistent chain arrays: {n} positions, "
                f"{len(self.velocities)} velocities, {len(self.masses)} masses"
            )
        if not np.all(np.isfinite(self.masses)) or np.any(self.masses <= 0):
            raise ValueError("Point masses must be positive and finite; tag immovable points as fixed")
        if not (np.isfinite(self.link_length) and self.link_length > 0):
            raise ValueError(f"link_length must be positive and finite, got {self.link_length}")
        if not (np.isfinite(self.linear_density) and self.linear_density > 0):
            raise ValueError(f"linear_density must be positive and finite, got {self.linear_density}")

        self.fixed = np.zeros(n, dtype=bool) if self.fixed is None else np.array(self.fixed, dtype=bool).reshape(-1)
        if self.fixed.shape != (n,):
            raise ValueError(f"fixed must have {n} entries, got {self.fixed.shape[0]}")

        self.tensions = np.zeros(n - 1) if self.tensions is None else f64(self.tensions).reshape(-1)
        if self.tensions.shape != (n - 1,):
            raise ValueError(f"tensions must have {n - 1} entries, got {self.tensions.shape[0]}")

        self.link_length = float(self.link_length)
        self.linear_density = float(self.linear_density)
        self.time = float(self.time)

    @classmethod
    def straight(
        cls,
        start: np.ndarray | tuple[float, float, float],
        direction: np.ndarray | tuple[float, float, float],
        n_points: int,
        link_length: float,
        linear_density: float,
        end_mass: float,
        velocity: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0),
    ) -> Chain:
        """
        Lay out a straight chain of n_points starting at `start`.

        Point 0 sits at `start`; each following point is one link length
        further along `direction`. Every point moves with `velocity`. The
        tip weighs end_mass, all other points linear_density * link_length.
        """
        d = unit(vec3(direction))
        if not d.any():
            raise ValueError("Chain direction must be non-zero")
        offsets = np.arange(n_points, dtype=np.float64)[:, None] * link_length
        positions = vec3(start)[None, :] + offsets * d[None, :]
        velocities = np.tile(vec3(velocity), (n_points, 1))
        masses = np.full(n_points, linear_density * link_length)
        masses[-1] = end_mass
        return cls(
            positions=positions,
            velocities=velocities,
            masses=masses,
            link_length=link_length,
            linear_density=linear_density,
        )

    @property
    def n_points(self) -> int:
        return len(self.positions)

    @property
    def n_links(self) -> int:
        return len(self.positions) - 1

    @property
    def length(self) -> float:
        """Deployed length: point count times link length."""
        return self.n_points * self.link_length

    @property
    def point_mass(self) -> float:
        """Mass given to each deployed point."""
        return self.linear_density * self.link_length

    def inv_masses(self) -> np.ndarray:
        """Inverse masses, exactly 0 for pinned points."""
        return inverse_masses(self.masses, self.fixed)

    def link_vectors(self) -> np.ndarray:
        """Vectors from point i to point i+1, shape (n - 1, 3)."""
        return np.diff(self.positions, axis=0)

    def link_lengths(self) -> np.ndarray:
        """Current link lengths, shape (n - 1,)."""
        return np.linalg.norm(self.link_vectors(), axis=1)

    def insert_point(
        self,
        position: np.ndarray,
        velocity: np.ndarray,
        mass: float,
        fixed: bool = False,
    ) -> None:
        """
        Insert a new anchor-adjacent point at index 0.

        All existing points shift up by one index and a zero tension slot
        is added for the new link. The arrays are reallocated.
        """
        mass = float(mass)
        if not np.isfinite(mass) or mass <= 0:
            raise ValueError(f"Point mass must be positive and finite, got {mass}")
        self.positions = np.vstack([vec3(position)[None, :], self.positions])
        self.velocities = np.vstack([vec3(velocity)[None, :], self.velocities])
        self.masses = np.concatenate([[mass], self.masses])
        self.fixed = np.concatenate([[bool(fixed)], self.fixed])
        self.tensions = np.concatenate([[0.0], self.tensions])

    def copy(self) -> Chain:
        """Deep copy of the chain state."""
        return Chain(
            positions=self.positions.copy(),
            velocities=self.velocities.copy(),
            masses=self.masses.copy(),
            link_length=self.link_length,
            linear_density=self.linear_density,
            fixed=self.fixed.copy(),
            tensions=self.tensions.copy(),
            time=self.time,
        )
