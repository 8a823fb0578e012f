from __future__ import annotations
import math
from dataclasses import dataclass

@dataclass(frozen=True)
class Point:
    x: float; y: float

    def __add__(self, o: "Point") -> "Point": return Point(self.x + o.x, self.y + o.y)
    def __sub__(self, o: "Point") -> "Point": return Point(self.x - o.x, self.y - o.y)

@dataclass(frozen=True)
class Landmark:
    """One detector keypoint: x/y normalized to the frame, z relative depth."""
    x: float; y: float; z: float = 0.0

def distance(a, b) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)

def midpoint(a, b) -> Point:
    return Point((a.x + b.x) / 2.0, (a.y + b.y) / 2.0)

def angle(a, b) -> float:
    """Direction of the vector a->b in radians (atan2 of dy, dx)."""
    return math.atan2(b.y - a.y, b.x - a.x)

def all_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)
