from __future__ import annotations
import math
from typing import Literal, Callable, Dict
from .geometry import distance
from .landmarks import NamedLandmarks

Direction = Literal["left", "right", "unknown"]
STRATEGIES = ("direct", "hysteresis", "nose")
DEFAULT_THRESHOLD = 0.02  # radians

# Convention: "left" means the left ear sits lower in the image (larger y).

def direct_direction(left_ear, right_ear) -> Direction:
    if left_ear.y > right_ear.y: return "left"
    if left_ear.y < right_ear.y: return "right"
    return "unknown"

def ear_tilt(left_ear, right_ear) -> float:
    """Signed tilt of the ear line from horizontal; positive when the left ear is lower."""
    return math.atan2(left_ear.y - right_ear.y, abs(left_ear.x - right_ear.x))

def hysteresis_direction(left_ear, right_ear, previous: Direction="unknown",
                         threshold: float=DEFAULT_THRESHOLD) -> Direction:
    a = ear_tilt(left_ear, right_ear)
    if a > threshold: return "left"
    if a < -threshold: return "right"
    return previous

def nose_direction(named: NamedLandmarks) -> Direction:
    # the outer corner nearer the nose bridge is on the side the head turned towards
    dl = distance(named.left_eye_left_corner, named.nose_bridge)
    dr = distance(named.right_eye_right_corner, named.nose_bridge)
    if dl < dr: return "left"
    if dl > dr: return "right"
    return "unknown"

class RotationClassifier:
    """Pick a rotation strategy once, then call per frame with the previous direction."""

    def __init__(self, strategy: str="hysteresis", threshold: float=DEFAULT_THRESHOLD):
        if strategy not in STRATEGIES:
            raise ValueError(f"unknown rotation strategy {strategy!r}, expected one of {STRATEGIES}")
        self.strategy = strategy
        self.threshold = threshold
        self._fn: Dict[str, Callable[[NamedLandmarks, Direction], Direction]] = {
            "direct": lambda n, prev: direct_direction(n.left_ear, n.right_ear),
            "hysteresis": lambda n, prev: hysteresis_direction(n.left_ear, n.right_ear, prev, self.threshold),
            "nose": lambda n, prev: nose_direction(n),
        }

    def __call__(self, named: NamedLandmarks, previous: Direction="unknown") -> Direction:
        return self._fn[self.strategy](named, previous)
