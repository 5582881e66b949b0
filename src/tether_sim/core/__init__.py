# MIT License (see LICENSE)
"""
Core simulation components.

This subpackage provides:
    - Force generators: external field, deployment braking.
    - Integrators: explicit Euler position update, pinned-point sync.
    - Deployment: chain growth as cable pays out.
    - Invariants: energy, momentum and length diagnostics.

Typical usage:
    from tether_sim.core import apply_field, euler_step

    apply_field(chain, anchor, field, dt=1e-4)
    euler_step(chain, anchor, dt=1e-4)
"""
from .forces import apply_field, apply_braking
from .integrators import euler_step, sync_pinned
from .deployment import deploy, check_deployment_lag, insertions_needed, deployment_gap
from .invariants import (
    kinetic_energy,
    potential_energy,
    total_energy,
    linear_momentum,
    length_errors,
    max_length_error,
    check_finite_state,
)

__all__ = [
    # Forces
    "apply_field",
    "apply_braking",
    # Integrators
    "euler_step",
    "sync_pinned",
    # Deployment
    "deploy",
    "check_deployment_lag",
    "insertions_needed",
    "deployment_gap",
    # Invariants
    "kinetic_energy",
    "potential_energy",
    "total_energy",
    "linear_momentum",
    "length_errors",
    "max_length_error",
    "check_finite_state",
]
