# MIT License (see LICENSE)
"""
Physical and numerical constants used throughout the simulation.

SI units throughout.
"""
from __future__ import annotations

# Gravitational acceleration used by the energy diagnostic, in m/s².
# The potential term is m·g·y with y the second coordinate.
STANDARD_GRAVITY: float = 9.81

# Standard gravitational parameter of the Earth, μ = GM, in m³/s².
MU_EARTH: float = 3.986e14

# Mean Earth radius in meters, reference for altitude readouts.
EARTH_RADIUS: float = 6.371e6

# Orbital radius of the reference satellite (≈400 km altitude).
REFERENCE_ORBIT_RADIUS: float = 6.771e6

# Weight given to the newest impulse sample in the smoothed link tension.
# At 1e-4 the estimate settles within ~1e4 steps.
TENSION_SMOOTHING: float = 1e-4

# Squared distance / squared speed below which the anchor-adjacent point
# counts as touching the anchor during braking, in m² and m²/s².
CONTACT_EPS_SQ: float = 1e-3

# Lengths below this are treated as coincident points.
DEGENERATE_LENGTH: float = 1e-12
