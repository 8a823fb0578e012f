from __future__ import annotations
import logging, math
from dataclasses import dataclass
from typing import Optional
from .geometry import Point, distance, midpoint, angle

log = logging.getLogger(__name__)

LENS_SPAN = 1.4  # lens span relative to the outer eye corners

@dataclass(frozen=True)
class EyeLine:
    left_eye: Point; right_eye: Point

    @property
    def mid(self) -> Point: return midpoint(self.left_eye, self.right_eye)
    @property
    def angle(self) -> float: return angle(self.left_eye, self.right_eye)
    @property
    def length(self) -> float: return distance(self.left_eye, self.right_eye)

def estimate_eye_line(left_corner, right_corner, span: float=LENS_SPAN) -> Optional[EyeLine]:
    """
    Widen the outer-corner segment symmetrically about its midpoint by `span`.
    Works in whatever space the corners live in (normalized or pixels).
    Returns None when the corners coincide.
    """
    d = distance(left_corner, right_corner)
    if not d > 0.0 or not math.isfinite(d):
        log.debug("degenerate eye corners (d=%r), no eye-line this frame", d)
        return None
    half = d * span / 2.0
    mid = midpoint(left_corner, right_corner)
    theta = angle(left_corner, right_corner)
    off = Point(half * math.cos(theta), half * math.sin(theta))
    return EyeLine(left_eye=mid - off, right_eye=mid + off)
