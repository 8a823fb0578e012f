from __future__ import annotations
import logging
from dataclasses import dataclass, asdict
from typing import Optional
import numpy as np
from .geometry import Landmark, distance

log = logging.getLogger(__name__)

# MediaPipe FaceMesh indices; these must match the detector's topology exactly.
LM = {
  "left_eye_left_corner": 33,
  "left_eye_right_corner": 133,
  "right_eye_left_corner": 362,
  "right_eye_right_corner": 263,
  "nose_bridge": 168,
  "left_ear": 127,
  "right_ear": 356,
}
MIN_LANDMARKS = max(LM.values()) + 1

@dataclass(frozen=True)
class NamedLandmarks:
    left_eye_left_corner: Landmark
    left_eye_right_corner: Landmark
    right_eye_left_corner: Landmark
    right_eye_right_corner: Landmark
    nose_bridge: Landmark
    left_ear: Landmark
    right_ear: Landmark

    @property
    def face_width(self) -> float:
        """Ear-to-ear distance in normalized units (fraction of frame width when level)."""
        return distance(self.left_ear, self.right_ear)

    def to_dict(self):
        return {k: asdict(v) for k, v in self.__dict__.items()}

def as_landmark_array(landmark_set) -> Optional[np.ndarray]:
    """Coerce a detector result into an (N,3) float array, or None for 'no face'."""
    if landmark_set is None: return None
    pts = np.asarray(landmark_set, dtype=np.float64)
    if pts.size == 0: return None
    if pts.ndim != 2 or pts.shape[1] not in (2, 3):
        raise ValueError(f"landmark set must be (N,2) or (N,3), got shape {pts.shape}")
    if pts.shape[1] == 2:
        pts = np.hstack([pts, np.zeros((len(pts), 1))])
    return pts

def select_landmarks(landmark_set) -> Optional[NamedLandmarks]:
    """Pick the seven named points out of a full landmark set. None means no face this frame."""
    pts = as_landmark_array(landmark_set)
    if pts is None:
        return None
    if len(pts) < MIN_LANDMARKS:
        log.warning("landmark set has %d points, need at least %d; skipping frame", len(pts), MIN_LANDMARKS)
        return None
    return NamedLandmarks(**{name: Landmark(*map(float, pts[i])) for name, i in LM.items()})
