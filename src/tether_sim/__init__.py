# MIT License (see LICENSE)
"""
tether_sim - A space tether deployment simulation engine.

This package models an inextensible cable paying out of a moving satellite
as a chain of point masses, solving the chain's length constraints exactly
in linear time per step.

Main entry points:
    - Cable: The simulation, owning the satellite and the chain.
    - CableConfig: Construction parameters.
    - Chain: The discretized cable state.
    - Anchor: The satellite body the cable is attached to.

Submodules:
    - constraints: Velocity solvers and length projection.
    - core: Force generators, integrator, deployment and diagnostics.
    - scenarios: Stock fields, braking profiles and the orbital deployment.
    - io: JSON scenario files.
    - recorder: Optional output adapters.

Example:
    from tether_sim import Cable, CableConfig
    from tether_sim.scenarios import uniform_field

    cable = Cable(CableConfig(deployment_velocity=(0, -1, 0)), field=uniform_field())
    cable.step(1e-3)
"""
from .cable import Cable
from .config import CableConfig
from .chain import Chain
from .types import Anchor
from .profiler import Profiler
from .errors import DeploymentLagError, DeploymentLagWarning

__all__ = [
    # Core simulation
    "Cable",
    "CableConfig",
    # State
    "Chain",
    "Anchor",
    # Diagnostics
    "Profiler",
    "DeploymentLagError",
    "DeploymentLagWarning",
]
