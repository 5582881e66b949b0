# MIT License (see LICENSE)
"""
The cable simulation and its step loop.

Cable owns the satellite (Anchor) and the discretized tether (Chain) and
advances them with a caller-controlled fixed timestep. Each step runs, in
order:
    1. Deployment: insert a point if the anchor has pulled away a link
       length, then reconcile velocities.
    2. Field forces on every point and the anchor.
    3. Braking between the anchor and the anchor-adjacent point.
    4. Inextensibility solve on velocities, with tension smoothing.
    5. Explicit Euler position update (anchor included).
    6. Length projection.

Structure:
    - User builds a CableConfig (or uses tether_sim.scenarios).
    - User creates a Cable with a force field and braking profile.
    - User calls cable.step(dt) in a loop and reads the accessors.

Steps are strictly sequential; nothing here is thread-safe, and the state
arrays may be reallocated on any step that deploys cable.
"""
from __future__ import annotations
from contextlib import nullcontext
from dataclasses import replace
from typing import TYPE_CHECKING, Any

import numpy as np

from .chain import Chain
from .config import CableConfig
from .constants import EARTH_RADIUS, STANDARD_GRAVITY
from .constraints.projection import project_lengths
from .constraints.solver import correct_velocities
from .core.deployment import check_deployment_lag, deploy
from .core.forces import apply_braking, apply_field
from .core.integrators import euler_step, sync_pinned
from .core.invariants import (
    check_finite_state,
    kinetic_energy,
    linear_momentum,
    max_length_error,
    total_energy,
)
from .profiler import Profiler
from .types import Anchor, BrakingProfile, ForceField, no_braking, zero_field
from .util import unit, vec3

if TYPE_CHECKING:
    from .recorder.adapter import RecorderAdapter


class Cable:
    """
    Tether deployment simulation.

    Args:
        config: Construction parameters. Defaults to CableConfig().
        field: Position -> acceleration-equivalent field. Defaults to none.
        braking: Deployed length -> braking force [N]. Defaults to none.
        profiler: Optional Profiler collecting per-phase timings.

    Attributes:
        config: The configuration the cable was built from.
        anchor: Satellite state.
        chain: Tether state, including the simulated clock.
        last_impulses: Per-link impulses of the most recent solve.
        last_braking_force: Braking force applied to point 0 last step.
        last_inserted: Points inserted by the most recent step.
    """

    def __init__(
        self,
        config: CableConfig | None = None,
        field: ForceField | None = None,
        braking: BrakingProfile | None = None,
        profiler: Profiler | None = None,
    ) -> None:
        self.config = config if config is not None else CableConfig()
        self.field = field if field is not None else zero_field
        self.braking = braking if braking is not None else no_braking
        self.profiler = profiler

        cfg = self.config
        self.anchor = Anchor(
            position=cfg.anchor_position,
            velocity=cfg.anchor_velocity,
            mass=cfg.anchor_mass,
        )
        self.chain = self._initial_chain()
        if cfg.pin_anchor_point:
            self.chain.fixed[0] = True
            sync_pinned(self.chain, self.anchor)
        project_lengths(self.chain.positions, self.chain.link_length, pin=0)

        self.last_impulses = np.zeros(self.chain.n_links)
        self.last_braking_force = np.zeros(3)
        self.last_inserted = 0

    def _initial_chain(self) -> Chain:
        cfg = self.config
        velocity = vec3(cfg.anchor_velocity) + vec3(cfg.deployment_velocity)

        if cfg.initial_points == 1:
            return Chain(
                positions=[cfg.anchor_position],
                velocities=[velocity],
                masses=[cfg.end_mass],
                link_length=cfg.link_length,
                linear_density=cfg.linear_density,
            )

        if cfg.initial_direction is not None:
            direction = vec3(cfg.initial_direction)
        else:
            direction = unit(vec3(cfg.deployment_velocity))
            if not direction.any():
                direction = np.array([0.0, -1.0, 0.0])

        return Chain.straight(
            start=cfg.anchor_position,
            direction=direction,
            n_points=cfg.initial_points,
            link_length=cfg.link_length,
            linear_density=cfg.linear_density,
            end_mass=cfg.end_mass,
            velocity=velocity,
        )

    @classmethod
    def from_state(
        cls,
        chain: Chain,
        anchor: Anchor,
        config: CableConfig | None = None,
        field: ForceField | None = None,
        braking: BrakingProfile | None = None,
        profiler: Profiler | None = None,
    ) -> Cable:
        """
        Wrap an existing chain and anchor in a Cable without re-initializing them.

        The configuration's geometry and anchor fields are overwritten from
        the given state; its option fields (insertion mode, smoothing, ...)
        are kept.
        """
        base = config if config is not None else CableConfig()
        config = replace(
            base,
            link_length=chain.link_length,
            linear_density=chain.linear_density,
            end_mass=float(chain.masses[-1]),
            anchor_mass=anchor.mass,
            anchor_position=tuple(anchor.position),
            anchor_velocity=tuple(anchor.velocity),
            pin_anchor_point=bool(chain.fixed[0]),
        )
        cable = cls.__new__(cls)
        cable.config = config
        cable.field = field if field is not None else zero_field
        cable.braking = braking if braking is not None else no_braking
        cable.profiler = profiler
        cable.anchor = anchor
        cable.chain = chain
        cable.last_impulses = np.zeros(chain.n_links)
        cable.last_braking_force = np.zeros(3)
        cable.last_inserted = 0
        return cable

    def _section(self, name: str):
        if self.profiler is None:
            return nullcontext()
        return self.profiler.section(name)

    def step(self, dt: float) -> None:
        """
        Advance the simulation by one fixed timestep.

        Args:
            dt: Timestep in seconds; must be positive and finite.

        Raises:
            ValueError: If dt is invalid. Nothing has been modified.
            DeploymentLagError: In strict deployment mode, when the anchor
                has outrun the insertion limit. Nothing has been modified.

        Exceptions from the field or braking callables, including the
        ValueError raised when they do not return a 3-vector, propagate
        mid-step. By then the clock has advanced and deployment may have
        inserted points, so the state is left partially updated.
        """
        dt = float(dt)
        if not np.isfinite(dt) or dt <= 0:
            raise ValueError(f"Timestep must be positive and finite, got {dt}")

        cfg = self.config
        chain, anchor = self.chain, self.anchor

        check_deployment_lag(
            chain, anchor,
            insertion=cfg.insertion,
            max_insertions=cfg.max_insertions_per_step,
            strict=cfg.strict_deployment,
        )

        chain.time += dt

        with self._section("deploy"):
            self.last_inserted = deploy(
                chain, anchor, dt,
                insertion=cfg.insertion,
                max_insertions=cfg.max_insertions_per_step,
                pin=cfg.pin_anchor_point,
                smoothing=cfg.tension_smoothing,
            )

        with self._section("forces"):
            apply_field(chain, anchor, self.field, dt)

        with self._section("braking"):
            self.last_braking_force = apply_braking(chain, anchor, self.braking, dt)

        with self._section("solve"):
            sync_pinned(chain, anchor)
            self.last_impulses = correct_velocities(chain, dt, cfg.tension_smoothing)

        with self._section("integrate"):
            euler_step(chain, anchor, dt)

        with self._section("project"):
            project_lengths(chain.positions, chain.link_length, pin=self._projection_pin())

    def _projection_pin(self) -> int | None:
        if self.last_inserted or self.chain.fixed[0] or self.config.projection_pin == "anchor":
            return 0
        return None

    def run(
        self,
        duration: float,
        dt: float,
        recorder: RecorderAdapter | None = None,
        record_every: int = 1,
        stride: int = 1,
    ) -> int:
        """
        Step until `duration` more seconds have been simulated.

        The last step is shortened so the run ends exactly on time.

        Args:
            duration: Simulated time to advance, in seconds.
            dt: Timestep in seconds.
            recorder: Optional recorder fed every `record_every` steps.
            record_every: Recording interval in steps.
            stride: Point stride passed to the recorder.

        Returns:
            Number of steps taken.
        """
        if duration < 0:
            raise ValueError(f"Duration must be non-negative, got {duration}")
        if record_every < 1:
            raise ValueError(f"record_every must be >= 1, got {record_every}")

        end = self.time + duration
        steps = 0
        while self.time < end - 1e-12:
            self.step(min(dt, end - self.time))
            steps += 1
            if recorder is not None and steps % record_every == 0:
                recorder.record_cable(self, stride=stride)
        check_finite_state(self.chain, self.anchor)
        return steps

    # --- Accessors ---

    @property
    def time(self) -> float:
        return self.chain.time

    @property
    def n_points(self) -> int:
        return self.chain.n_points

    @property
    def length(self) -> float:
        """Deployed length: point count times link length."""
        return self.chain.length

    @property
    def positions(self) -> np.ndarray:
        return self.chain.positions.copy()

    @property
    def velocities(self) -> np.ndarray:
        return self.chain.velocities.copy()

    @property
    def masses(self) -> np.ndarray:
        return self.chain.masses.copy()

    @property
    def tensions(self) -> np.ndarray:
        return self.chain.tensions.copy()

    @property
    def anchor_position(self) -> np.ndarray:
        return self.anchor.position.copy()

    @property
    def anchor_velocity(self) -> np.ndarray:
        return self.anchor.velocity.copy()

    def energy(self, g: float = STANDARD_GRAVITY) -> float:
        """Σ m (0.5 v² + g y) over the chain points."""
        return total_energy(self.chain, g)

    def kinetic_energy(self) -> float:
        return kinetic_energy(self.chain)

    def momentum(self, include_anchor: bool = True) -> np.ndarray:
        return linear_momentum(self.chain, self.anchor if include_anchor else None)

    def max_length_error(self) -> float:
        return max_length_error(self.chain)

    def max_tension(self) -> float:
        if self.chain.n_links == 0:
            return 0.0
        return float(np.max(self.chain.tensions))

    def midpoint_speed(self) -> float:
        """Speed of the middle point of the cable, in m/s."""
        return float(np.linalg.norm(self.chain.velocities[self.chain.n_points // 2]))

    def midpoint_altitude(self, reference_radius: float = EARTH_RADIUS) -> float:
        """Distance of the middle point from the origin minus reference_radius, in m."""
        return float(np.linalg.norm(self.chain.positions[self.chain.n_points // 2])) - reference_radius

    def snapshot(self) -> dict[str, Any]:
        """Copy of the observable state as plain numpy arrays and floats."""
        return {
            "time": self.time,
            "length": self.length,
            "n_points": self.n_points,
            "positions": self.positions,
            "velocities": self.velocities,
            "masses": self.masses,
            "fixed": self.chain.fixed.copy(),
            "tensions": self.tensions,
            "anchor_position": self.anchor_position,
            "anchor_velocity": self.anchor_velocity,
            "anchor_mass": self.anchor.mass,
        }
