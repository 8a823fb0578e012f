from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Tuple
from .estimator import Pose

Vec3 = Tuple[float, float, float]

@dataclass(frozen=True)
class ModelTransform:
    scale: Vec3
    rotation: Vec3   # euler xyz, radians
    position: Vec3

def to_transform(pose: Pose) -> ModelTransform:
    # yaw is measured in image space (y down), hence the sign flip for a y-up scene
    return ModelTransform(scale=(pose.scale, pose.scale, pose.depth_scale),
                          rotation=(pose.pitch, -pose.yaw, 0.0),
                          position=pose.position)

def apply_pose(model: Optional[Any], pose: Optional[Pose]) -> bool:
    """
    Copy a Pose onto a scene node exposing `scale`, `rotation` and `position`.
    The node may not be loaded yet (None); that frame is skipped and False returned.
    """
    if model is None or pose is None:
        return False
    t = to_transform(pose)
    model.scale = t.scale
    model.rotation = t.rotation
    model.position = t.position
    return True
