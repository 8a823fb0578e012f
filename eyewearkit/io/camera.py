from __future__ import annotations
import cv2, logging, time
from dataclasses import dataclass
from typing import Iterator, Optional
import numpy as np

log = logging.getLogger(__name__)

@dataclass(frozen=True)
class Frame:
    image: np.ndarray   # BGR
    index: int
    ts: float

def open_source(source: int|str, width: int=640, height: int=480) -> cv2.VideoCapture:
    """Camera index ("0" counts as one) or video file path -> opened capture."""
    if isinstance(source, str) and source.isdigit():
        source = int(source)
    cap = cv2.VideoCapture(source)
    if isinstance(source, int):
        # requested size only applies to live cameras; files keep their own
        if width:  cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        if height: cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
    if not cap.isOpened():
        cap.release()
        raise RuntimeError(f"Cannot open camera {source!r}")
    return cap

def frames(source: int|str=0, width: int=640, height: int=480, mirror: bool=False,
           limit: Optional[int]=None) -> Iterator[Frame]:
    """
    Frame pump for the tracker. One frame is handed out at a time and the next read only
    happens once the consumer asks for it, so per-frame processing never overlaps.
    mirror=True flips horizontally for a selfie view; landmarks then follow the flipped image.
    """
    cap = open_source(source, width, height)
    log.info("capture opened: %r (%dx%d)", source,
             int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)), int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)))
    i = 0
    try:
        while limit is None or i < limit:
            ok, img = cap.read()
            if not ok: break
            if mirror: img = cv2.flip(img, 1)
            yield Frame(image=img, index=i, ts=time.time())
            i += 1
    finally:
        cap.release()
        log.info("capture released after %d frames", i)

def frames_from_config(capture, source: int|str|None=None) -> Iterator[Frame]:
    return frames(capture.camera if source is None else source, capture.width, capture.height, capture.mirror)
