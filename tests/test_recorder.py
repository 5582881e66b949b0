import io

import pytest
from tether_sim import Cable, CableConfig
from tether_sim.recorder import BufferedRecorder, DebugRecorder, NullRecorder


def _cable(points=5):
    return Cable(CableConfig(initial_points=points, initial_direction=(0.0, -1.0, 0.0)))


def test_debug_recorder_status_line():
    out = io.StringIO()
    recorder = DebugRecorder(output=out)

    recorder.record_cable(_cable())

    lines = out.getvalue().splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("t=0.0000s length=0.500m points=5")
    assert "max_tension=" in lines[0]
    assert "mid_speed=0.00m/s" in lines[0]


def test_debug_recorder_verbose_points():
    out = io.StringIO()
    recorder = DebugRecorder(output=out, verbose=True)

    recorder.record_cable(_cable(), stride=2)

    lines = out.getvalue().splitlines()
    # Status line plus points 0, 2 and 4; the tip has no tension
    assert len(lines) == 4
    assert lines[1].startswith("  [0]")
    assert " T=" in lines[1]
    assert " T=" not in lines[3]


def test_buffered_recorder_frames():
    cable = _cable(points=6)
    recorder = BufferedRecorder()

    cable.run(duration=0.003, dt=1e-3, recorder=recorder, stride=2)

    assert len(recorder.frames) == 3
    frame = recorder.frames[0]
    assert frame["time"] == pytest.approx(1e-3)
    assert [p["index"] for p in frame["points"]] == [0, 2, 4]
    assert frame["points"][0]["tension"] is not None
    assert len(frame["points"][0]["position"]) == 3

    recorder.clear()
    assert recorder.frames == []


def test_record_every():
    cable = _cable()
    recorder = BufferedRecorder()
    cable.run(duration=0.01, dt=1e-3, recorder=recorder, record_every=5)
    assert len(recorder.frames) == 2


def test_null_recorder_and_bad_stride():
    recorder = NullRecorder()
    recorder.record_cable(_cable())
    with pytest.raises(ValueError):
        recorder.record_cable(_cable(), stride=0)
