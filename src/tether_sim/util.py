# MIT License (see LICENSE)
"""
Utility functions for vector math and numeric operations.

Thin helpers over numpy for the 3D vectors used throughout the engine.
Single vectors are arrays of shape (3,); per-point state is stored as
arrays of shape (n, 3).
"""
from __future__ import annotations

import numpy as np


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Used throughout the codebase to ensure consistent numeric precision
    and allow tuple/list inputs for positions and velocities.
    """
    return np.array(x, dtype=np.float64)


def vec3(x) -> np.ndarray:
    """Convert an array-like to a float64 vector of shape (3,)."""
    v = f64(x).reshape(-1)
    if v.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {v.shape}")
    return v


def norm2(v: np.ndarray) -> float:
    """Squared magnitude of a vector. Avoids sqrt for performance."""
    return float(np.dot(v, v))


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a vector."""
    return float(np.sqrt(norm2(v)))


def unit(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """
    Return a unit (normalized) vector in the same direction as v.

    Returns zero vector if |v| < eps to avoid division by zero.
    """
    n = norm(v)
    if n < eps:
        return np.zeros_like(v, dtype=np.float64)
    return v / n


def unit_rows(d: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """
    Row-wise normalization of an (n, 3) array.

    Rows shorter than eps come back as zero vectors rather than NaN.
    """
    lengths = np.linalg.norm(d, axis=1)
    out = np.zeros_like(d, dtype=np.float64)
    ok = lengths >= eps
    out[ok] = d[ok] / lengths[ok, None]
    return out


def inverse_masses(masses, fixed=None) -> np.ndarray:
    """
    Inverse masses 1/m, with pinned points set to exactly 0.

    Pinned entries are never divided, so a pinned point may carry any mass.
    """
    masses = f64(masses)
    inv = np.zeros_like(masses)
    free = np.ones(masses.shape, dtype=bool) if fixed is None else ~np.asarray(fixed, dtype=bool)
    inv[free] = 1.0 / masses[free]
    return inv


def rotation_matrix(axis, angle: float) -> np.ndarray:
    """
    Rotation matrix for a right-handed rotation of `angle` radians about `axis`.

    Rodrigues' formula: R = I + sin(a) K + (1 - cos(a)) K²
    where K is the cross-product matrix of the unit axis.
    """
    k = unit(vec3(axis))
    K = np.array([
        [0.0, -k[2], k[1]],
        [k[2], 0.0, -k[0]],
        [-k[1], k[0], 0.0],
    ])
    return np.eye(3) + np.sin(angle) * K + (1.0 - np.cos(angle)) * (K @ K)
