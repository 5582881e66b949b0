# MIT License (see LICENSE)
"""
Recorders for observing a simulation run.

This subpackage provides:
    - RecorderAdapter: Abstract base class defining the recording interface.
    - DebugRecorder: Status lines (and optionally points) to a text stream.
    - NullRecorder: No-op recorder for performance testing.
    - BufferedRecorder: Keeps frames in memory for export.

The engine has no output dependency; these adapters are optional.

Typical usage:
    from tether_sim.recorder import DebugRecorder

    cable.run(duration=1.0, dt=1e-4, recorder=DebugRecorder(), record_every=1000)
"""
from .adapter import (
    RecorderAdapter,
    DebugRecorder,
    NullRecorder,
    BufferedRecorder,
)

__all__ = [
    "RecorderAdapter",
    "DebugRecorder",
    "NullRecorder",
    "BufferedRecorder",
]
