# MIT License (see LICENSE)
"""
Recorder adapters for observing a running simulation.

The engine itself never prints or writes files. Recorders are fed from
Cable.run (or called directly) and decide what to do with each frame:
write a status line, keep it in memory, or drop it.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TextIO
import sys

import numpy as np

if TYPE_CHECKING:
    from ..cable import Cable


class RecorderAdapter(ABC):
    """
    Abstract base class for recorder implementations.

    Usage:
        recorder = MyRecorder()
        recorder.begin_frame(cable)
        for i in range(cable.n_points):
            recorder.record_point(i, position, velocity, tension)
        recorder.end_frame()

    Or use the convenience method:
        recorder.record_cable(cable)
    """

    @abstractmethod
    def begin_frame(self, cable: Cable) -> None:
        """
        Begin a new frame.

        Args:
            cable: The simulation, for frame-level values (time, length, ...).
        """
        ...

    @abstractmethod
    def record_point(
        self,
        index: int,
        position: np.ndarray,
        velocity: np.ndarray,
        tension: float | None,
    ) -> None:
        """
        Record a single chain point.

        Args:
            index: Point index (0 is anchor-adjacent).
            position: Point position [m].
            velocity: Point velocity [m/s].
            tension: Tension of the link towards the tip, None for the tip.
        """
        ...

    @abstractmethod
    def end_frame(self) -> None:
        """Finalize the current frame."""
        ...

    def record_cable(self, cable: Cable, stride: int = 1) -> None:
        """
        Record every `stride`-th point of the cable as one frame.

        Args:
            cable: The simulation to record.
            stride: Point step; 1 records every point.
        """
        if stride < 1:
            raise ValueError(f"stride must be >= 1, got {stride}")
        chain = cable.chain
        self.begin_frame(cable)
        for i in range(0, chain.n_points, stride):
            tension = float(chain.tensions[i]) if i < chain.n_links else None
            self.record_point(i, chain.positions[i], chain.velocities[i], tension)
        self.end_frame()


class DebugRecorder(RecorderAdapter):
    """
    Text recorder for development and long runs.

    Writes one status line per frame to a stream (stdout by default), and
    one line per recorded point when verbose.

    Output:
        t=0.0200s length=0.300m points=3 max_tension=0.000012N mid_speed=0.51m/s
    """

    def __init__(self, output: TextIO | None = None, verbose: bool = False):
        """
        Args:
            output: Output stream (defaults to sys.stdout).
            verbose: If True, also write every recorded point.
        """
        self.output = output or sys.stdout
        self.verbose = verbose

    def begin_frame(self, cable: Cable) -> None:
        self.output.write(
            f"t={cable.time:.4f}s length={cable.length:.3f}m points={cable.n_points} "
            f"max_tension={cable.max_tension():.6g}N mid_speed={cable.midpoint_speed():.2f}m/s\n"
        )

    def record_point(self, index, position, velocity, tension) -> None:
        if not self.verbose:
            return
        line = (
            f"  [{index}] @ ({position[0]:.3f}, {position[1]:.3f}, {position[2]:.3f}) "
            f"v=({velocity[0]:.3f}, {velocity[1]:.3f}, {velocity[2]:.3f})"
        )
        if tension is not None:
            line += f" T={tension:.4g}"
        self.output.write(line + "\n")

    def end_frame(self) -> None:
        self.output.flush()


class NullRecorder(RecorderAdapter):
    """No-op recorder, for timing runs without output overhead."""

    def begin_frame(self, cable: Cable) -> None:
        pass

    def record_point(self, index, position, velocity, tension) -> None:
        pass

    def end_frame(self) -> None:
        pass


class BufferedRecorder(RecorderAdapter):
    """
    Recorder that keeps frames in memory for later export.

    Example:
        recorder = BufferedRecorder()
        cable.run(duration=1.0, dt=1e-4, recorder=recorder, record_every=100)

        for frame in recorder.frames:
            print(f"t={frame['time']}, points={len(frame['points'])}")
    """

    def __init__(self):
        self.frames: list[dict] = []
        self._current_frame: dict | None = None

    def begin_frame(self, cable: Cable) -> None:
        self._current_frame = {
            "time": cable.time,
            "length": cable.length,
            "anchor_position": cable.anchor.position.tolist(),
            "points": [],
        }

    def record_point(self, index, position, velocity, tension) -> None:
        if self._current_frame is None:
            return
        self._current_frame["points"].append({
            "index": index,
            "position": np.asarray(position).tolist(),
            "velocity": np.asarray(velocity).tolist(),
            "tension": tension,
        })

    def end_frame(self) -> None:
        if self._current_frame is not None:
            self.frames.append(self._current_frame)
            self._current_frame = None

    def clear(self) -> None:
        self.frames.clear()
