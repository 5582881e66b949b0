# MIT License (see LICENSE)
"""
Constraint solvers for the cable chain.

This subpackage provides:
    - solve_chain_velocities: Exact O(n) inextensibility solver.
    - solve_chain_velocities_gs: Gauss-Seidel reference solver.
    - correct_velocities / update_tensions: Solver plus tension smoothing.
    - project_lengths: Position-level length restoration.

Typical usage:
    from tether_sim.constraints import correct_velocities, project_lengths

    correct_velocities(chain, dt=1e-4)
    project_lengths(chain.positions, chain.link_length, pin=0)
"""
from .solver import (
    solve_chain_velocities,
    solve_chain_velocities_gs,
    separating_velocities,
    link_directions,
    update_tensions,
    correct_velocities,
)
from .projection import project_lengths

__all__ = [
    # Velocity level
    "solve_chain_velocities",
    "solve_chain_velocities_gs",
    "separating_velocities",
    "link_directions",
    "update_tensions",
    "correct_velocities",
    # Position level
    "project_lengths",
]
