from __future__ import annotations
from typing import Optional
import mediapipe as mp
import numpy as np
import cv2

class FaceLandmarks:
    """MediaPipe FaceMesh wrapper: BGR frame -> (N,3) normalized landmarks of the first face, or None."""

    def __init__(self, static_image_mode=False, max_num_faces=1, refine_landmarks=True,
                 min_detection_confidence=0.5, min_tracking_confidence=0.5):
        self.mesh = mp.solutions.face_mesh.FaceMesh(static_image_mode=static_image_mode,
                                                    refine_landmarks=refine_landmarks,
                                                    max_num_faces=max_num_faces,
                                                    min_detection_confidence=min_detection_confidence,
                                                    min_tracking_confidence=min_tracking_confidence)

    @classmethod
    def from_config(cls, cfg) -> "FaceLandmarks":
        return cls(**cfg.model_dump())

    def __call__(self, frame_bgr) -> Optional[np.ndarray]:
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        res = self.mesh.process(rgb)
        if not res.multi_face_landmarks: return None
        lms = res.multi_face_landmarks[0]
        return np.array([(lm.x, lm.y, lm.z) for lm in lms.landmark], dtype=np.float64)

    def close(self):
        self.mesh.close()

    def __enter__(self): return self
    def __exit__(self, *exc): self.close()
