from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Tuple
from ..face.geometry import distance, midpoint, angle, all_finite
from ..runtime.bridge import Coordinates

log = logging.getLogger(__name__)

@dataclass(frozen=True)
class PoseParams:
    k_scale: float = 10.0
    k_depth: float = 8.0
    pitch_damping: float = 0.5
    position_gain: float = 10.0
    depth_gain: float = 5.0

@dataclass(frozen=True)
class Pose:
    scale: float
    depth_scale: float
    yaw: float             # radians, in-plane tilt of the eye-line
    pitch: float           # radians, already dampened
    position: Tuple[float, float, float]
    raw_pitch: float = 0.0

    def is_finite(self) -> bool:
        return all_finite(self.scale, self.depth_scale, self.yaw, self.pitch, *self.position)

    def to_dict(self):
        return {"scale": self.scale, "depth_scale": self.depth_scale, "yaw": self.yaw,
                "pitch": self.pitch, "position": list(self.position)}

def estimate_pose(coords: Coordinates, params: PoseParams=PoseParams()) -> Optional[Pose]:
    """
    Scale, yaw, pitch and position of the overlay from eye-line endpoints and ears.
    Returns None when an input is missing or the eye-line is degenerate.
    """
    if not coords.complete:
        return None
    le, re, lear, rear = coords.left_eye, coords.right_eye, coords.left_ear, coords.right_ear

    eye_dist = distance(le, re)
    if not eye_dist > 0.0:
        log.debug("eye points coincide, keeping previous pose")
        return None
    scale = eye_dist * params.k_scale
    # depth axis only: ear span shrinks as the head turns
    depth_scale = distance(lear, rear) * params.k_depth

    yaw = angle(le, re)
    vertical = angle(midpoint(le, lear), midpoint(re, rear))
    raw_pitch = vertical - yaw

    c = midpoint(le, re)
    cx, cy = c.x - 0.5, c.y - 0.5
    # image y grows downwards, model y grows upwards
    position = (cx * params.position_gain, -cy * params.position_gain, -abs(cy) * params.depth_gain)

    pose = Pose(scale=scale, depth_scale=depth_scale, yaw=yaw, pitch=raw_pitch * params.pitch_damping,
                position=position, raw_pitch=raw_pitch)
    if not pose.is_finite():
        log.debug("non-finite pose %r dropped", pose)
        return None
    return pose

class PoseEstimator:
    """Renderer-side consumer: reads Coordinates each frame and keeps the last good Pose."""

    def __init__(self, params: PoseParams=PoseParams()):
        self.params = params
        self.pose: Optional[Pose] = None

    def update(self, coords: Coordinates) -> Optional[Pose]:
        p = estimate_pose(coords, self.params)
        if p is not None: self.pose = p
        return self.pose
