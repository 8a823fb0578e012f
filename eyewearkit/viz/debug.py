from __future__ import annotations
import logging, math
from typing import Optional
import cv2
import numpy as np
from ..face.eyeline import EyeLine, estimate_eye_line, LENS_SPAN
from ..face.geometry import Point
from ..face.landmarks import NamedLandmarks, as_landmark_array

log = logging.getLogger(__name__)

class DebugRenderer:
    """
    Draws landmarks and the derived eye-line on a BGR frame for visual checks.
    Purely observational: nothing here feeds back into pose estimation.

    Args:
        span: lens span factor, same as the pipeline's.
        glasses: optional image laid along the eye-line (BGRA, BGR or gray; 8 or 16 bit).
            None, or anything else, skips it.
        show_mesh: draw every landmark as a small dot.
    """
    RED = (0, 0, 255); GREEN = (0, 255, 0); YELLOW = (0, 255, 255)
    PURPLE = (128, 0, 128); ORANGE = (0, 165, 255); WHITE = (255, 255, 255)
    FONT = cv2.FONT_HERSHEY_SIMPLEX

    def __init__(self, span: float=LENS_SPAN, glasses: Optional[np.ndarray]=None, show_mesh: bool=True):
        self.span = span
        self.glasses = self._as_bgra(glasses)
        if glasses is not None and self.glasses is None:
            log.warning("unsupported glasses image (shape %s, dtype %s), drawing without it",
                        getattr(glasses, "shape", None), getattr(glasses, "dtype", None))
        self.show_mesh = show_mesh

    @staticmethod
    def _as_bgra(img) -> Optional[np.ndarray]:
        """`img` as 8-bit BGRA, or None when it cannot be used."""
        if img is None or not isinstance(img, np.ndarray) or img.ndim not in (2, 3) or img.size == 0:
            return None
        if img.dtype == np.uint16:
            img = (img >> 8).astype(np.uint8)
        elif img.dtype != np.uint8:
            return None
        if img.ndim == 2 or img.shape[2] == 1:
            return cv2.cvtColor(np.ascontiguousarray(img.reshape(img.shape[:2])), cv2.COLOR_GRAY2BGRA)
        if img.shape[2] == 3:
            return cv2.cvtColor(img, cv2.COLOR_BGR2BGRA)
        if img.shape[2] == 4:
            return img
        return None

    @staticmethod
    def _px(p, w, h):
        return (int(round(p.x * w)), int(round(p.y * h)))

    def draw(self, frame: np.ndarray, landmarks=None, named: Optional[NamedLandmarks]=None,
             direction: str="unknown") -> np.ndarray:
        h, w = frame.shape[:2]
        pts = as_landmark_array(landmarks)
        if self.show_mesh and pts is not None:
            for x, y in pts[:, :2]:
                cv2.circle(frame, (int(x * w), int(y * h)), 1, self.RED, -1)
        if named is None:
            return frame

        # eye-line in pixel space so its angle matches what is on screen
        lc = Point(named.left_eye_left_corner.x * w, named.left_eye_left_corner.y * h)
        rc = Point(named.right_eye_right_corner.x * w, named.right_eye_right_corner.y * h)
        line = estimate_eye_line(lc, rc, self.span)
        if line is not None:
            if self.glasses is not None:
                self.overlay_glasses(frame, line)
            self.draw_eye_line(frame, line)
            self.draw_ear_line(frame, line, named, direction)

        for c in (named.left_eye_left_corner, named.right_eye_right_corner):
            cv2.circle(frame, self._px(c, w, h), 5, self.GREEN, -1)
        for e in (named.left_ear, named.right_ear):
            cv2.circle(frame, self._px(e, w, h), 5, self.YELLOW, -1)

        self.draw_hud(frame, named.face_width, direction)
        return frame

    def draw_eye_line(self, frame, line: EyeLine):
        # endpoints at (-len/2, 0) and (len/2, 0) in the line's rotated frame
        mid, half, theta = line.mid, line.length / 2.0, line.angle
        dx, dy = half * math.cos(theta), half * math.sin(theta)
        a = (int(round(mid.x - dx)), int(round(mid.y - dy)))
        b = (int(round(mid.x + dx)), int(round(mid.y + dy)))
        cv2.line(frame, a, b, self.PURPLE, 2)

    def draw_ear_line(self, frame, line: EyeLine, named: NamedLandmarks, direction: str):
        h, w = frame.shape[:2]
        # "left" means the left ear sits lower; the line goes to the lower (non-raised) ear
        if direction == "left":
            start, ear = line.left_eye, named.left_ear
        elif direction == "right":
            start, ear = line.right_eye, named.right_ear
        else:
            return
        cv2.line(frame, (int(round(start.x)), int(round(start.y))), self._px(ear, w, h), self.ORANGE, 2)

    def overlay_glasses(self, frame, line: EyeLine):
        img = self.glasses
        gh, gw = img.shape[:2]
        s = line.length / gw
        c, sn = math.cos(line.angle), math.sin(line.angle)
        mid = line.mid
        # image centre -> eye-line midpoint, rotated by the eye-line angle
        M = np.array([[s * c, -s * sn, mid.x - s * (c * gw / 2 - sn * gh / 2)],
                      [s * sn,  s * c, mid.y - s * (sn * gw / 2 + c * gh / 2)]], dtype=np.float32)
        h, w = frame.shape[:2]
        warped = cv2.warpAffine(img, M, (w, h), flags=cv2.INTER_LINEAR,
                                borderMode=cv2.BORDER_CONSTANT, borderValue=(0, 0, 0, 0))
        alpha = warped[:, :, 3:4].astype(np.float32) / 255.0
        blended = frame.astype(np.float32) * (1.0 - alpha) + warped[:, :, :3].astype(np.float32) * alpha
        frame[:] = blended.astype(frame.dtype)

    def draw_hud(self, frame, face_width: float, direction: str):
        cv2.putText(frame, f"Face width: {round(face_width * 100)}%", (10, 25), self.FONT, 0.6, self.WHITE, 2)
        cv2.putText(frame, f"Rotation: {direction}", (10, 50), self.FONT, 0.6, self.WHITE, 2)
