from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional
from ..config import EyewearConfig
from ..face.landmarks import NamedLandmarks, select_landmarks
from ..face.eyeline import EyeLine, estimate_eye_line
from ..face.rotation import Direction, RotationClassifier
from ..pose.estimator import Pose, estimate_pose
from .bridge import Coordinates, CoordinateBridge, Point2
from .events import DebugSnapshot

log = logging.getLogger(__name__)

@dataclass(frozen=True)
class FrameState:
    """What carries over between frames. Nothing else is remembered."""
    direction: Direction = "unknown"
    eye_line: Optional[EyeLine] = None
    pose: Optional[Pose] = None

@dataclass(frozen=True)
class FrameResult:
    state: FrameState
    coordinates: Optional[Coordinates]   # None: nothing new to publish this frame
    named: Optional[NamedLandmarks] = None

    @property
    def detected(self) -> bool: return self.named is not None
    @property
    def direction(self) -> Direction: return self.state.direction
    @property
    def eye_line(self) -> Optional[EyeLine]: return self.state.eye_line
    @property
    def pose(self) -> Optional[Pose]: return self.state.pose

    def snapshot(self) -> Optional[DebugSnapshot]:
        if self.named is None: return None
        # a kept eye-line belongs to an earlier frame; do not pair it with these landmarks
        eye_line = self.state.eye_line if self.coordinates is not None else None
        return DebugSnapshot.build(self.named, eye_line, self.state.direction)

def process_frame(landmark_set, state: FrameState=FrameState(), config: Optional[EyewearConfig]=None,
                  classifier: Optional[RotationClassifier]=None) -> FrameResult:
    """
    One frame of landmarks -> new state. Pure: the caller owns `state` and the bridge.
    Skipped derivations keep the previous value instead of emitting NaN.
    """
    if config is None: config = EyewearConfig()
    named = select_landmarks(landmark_set)
    if named is None:
        log.debug("no face this frame")
        return FrameResult(state=state, coordinates=None)

    classifier = classifier or RotationClassifier(config.rotation.strategy, config.rotation.threshold)
    direction = classifier(named, state.direction)

    eye_line = estimate_eye_line(named.left_eye_left_corner, named.right_eye_right_corner, config.eyeline.span)
    if eye_line is None:
        return FrameResult(state=replace(state, direction=direction), coordinates=None, named=named)

    coords = Coordinates(left_ear=Point2.of(named.left_ear), right_ear=Point2.of(named.right_ear),
                         left_eye=Point2.of(eye_line.left_eye), right_eye=Point2.of(eye_line.right_eye))
    pose = estimate_pose(coords, config.pose.params()) or state.pose
    return FrameResult(state=FrameState(direction=direction, eye_line=eye_line, pose=pose),
                       coordinates=coords, named=named)

class Tracker:
    """
    Frame-pump side glue: detector -> process_frame -> bridge.
    `detector` is any callable frame -> landmark set (or None / empty for no face).
    Not reentrant; the frame pump must not call it again before it returns.
    """
    def __init__(self, detector: Callable[[Any], Any], bridge: Optional[CoordinateBridge]=None,
                 config: Optional[EyewearConfig]=None):
        self.detector = detector
        self.bridge = bridge or CoordinateBridge()
        self.config = config or EyewearConfig()
        self.classifier = RotationClassifier(self.config.rotation.strategy, self.config.rotation.threshold)
        self.state = FrameState()
        self.last: Optional[FrameResult] = None
        self.landmarks = None  # full landmark set of the last frame, for debug drawing

    def reset(self):
        self.state = FrameState(); self.last = None; self.landmarks = None

    def __call__(self, frame) -> FrameResult:
        self.landmarks = self.detector(frame)
        res = process_frame(self.landmarks, self.state, self.config, self.classifier)
        self.state = res.state
        if res.coordinates is not None:
            self.bridge.write(res.coordinates)
        self.last = res
        return res
