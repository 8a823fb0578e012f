import numpy as np
import pytest
from eyewearkit.config import EyewearConfig
from eyewearkit.runtime.bridge import CoordinateBridge
from eyewearkit.runtime.pipeline import process_frame, FrameState, Tracker

def fake_face(lear=(0.30,0.50), rear=(0.70,0.50), llc=(0.40,0.45), rrc=(0.60,0.45)):
    pts = np.zeros((468,3), dtype=float)
    pts[33,:2] = llc; pts[263,:2] = rrc
    pts[133,:2] = [0.46,0.45]; pts[362,:2] = [0.54,0.45]
    pts[168,:2] = [0.50,0.44]
    pts[127,:2] = lear; pts[356,:2] = rear
    return pts

def test_no_face_keeps_state():
    state = FrameState(direction="left")
    for lms in (None, [], np.zeros((0,3))):
        res = process_frame(lms, state)
        assert res.coordinates is None and res.state is state and not res.detected

def test_full_frame():
    res = process_frame(fake_face(lear=(0.30,0.55)))
    c = res.coordinates
    assert c.complete
    assert c.left_eye.x == pytest.approx(0.33) and c.right_eye.x == pytest.approx(0.67)
    assert c.left_ear.y == pytest.approx(0.55)
    assert res.direction == "left"
    assert res.pose.scale == pytest.approx(3.4)

def test_level_ears_keep_previous_direction():
    res = process_frame(fake_face(), FrameState(direction="right"))
    assert res.direction == "right"
    assert process_frame(fake_face()).direction == "unknown"

def test_direct_strategy_from_config():
    cfg = EyewearConfig.model_validate({"rotation": {"strategy": "direct"}})
    assert process_frame(fake_face(), FrameState(direction="right"), cfg).direction == "unknown"

def test_degenerate_corners_keep_eye_line_and_pose():
    prev = process_frame(fake_face()).state
    res = process_frame(fake_face(llc=(0.5,0.45), rrc=(0.5,0.45), lear=(0.30,0.60)), prev)
    assert res.coordinates is None
    assert res.eye_line is prev.eye_line and res.pose is prev.pose
    assert res.direction == "left"
    assert np.isfinite(res.pose.scale)

def test_snapshot():
    res = process_frame(fake_face(lear=(0.30,0.55)))
    snap = res.snapshot()
    assert snap.direction == "left"
    assert snap.face_width == pytest.approx(np.hypot(0.40, 0.05))
    assert snap.eye_line.length == pytest.approx(0.28)
    assert set(snap.landmarks) >= {"nose_bridge", "left_ear", "right_ear"}
    assert process_frame(None).snapshot() is None

def test_tracker_writes_bridge_only_on_detection():
    frames = [fake_face(), None, fake_face(lear=(0.30,0.55))]
    bridge = CoordinateBridge()
    tracker = Tracker(detector=lambda f: f, bridge=bridge)
    tracker(frames[0]); first = bridge.read()
    tracker(frames[1])
    assert bridge.read() is first and bridge.frames == 1
    res = tracker(frames[2])
    assert bridge.frames == 2 and bridge.read().left_ear.y == pytest.approx(0.55)
    assert tracker.state is res.state and res.direction == "left"
    tracker.reset()
    assert tracker.state.direction == "unknown" and tracker.last is None

def test_snapshot_drops_eye_line_from_an_earlier_frame():
    prev = process_frame(fake_face()).state
    res = process_frame(fake_face(llc=(0.5,0.45), rrc=(0.5,0.45)), prev)
    snap = res.snapshot()
    assert snap is not None and snap.eye_line is None
    assert res.eye_line is prev.eye_line

def test_default_config_is_fresh_per_call():
    cfg = EyewearConfig.model_validate({"rotation": {"strategy": "direct"}})
    process_frame(fake_face(), FrameState(direction="right"), cfg)
    # the call above must not leak into later calls without a config
    assert process_frame(fake_face(), FrameState(direction="right")).direction == "right"
    assert process_frame(fake_face(), FrameState(direction="right"), None).direction == "right"
