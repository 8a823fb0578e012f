from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class Point2(BaseModel):
    model_config = ConfigDict(frozen=True)
    x: float; y: float

    @classmethod
    def of(cls, p) -> "Point2":
        return cls(x=float(p.x), y=float(p.y))

class Coordinates(BaseModel):
    """Latest eye-line endpoints and ear points. Readers must tolerate any field being None."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)
    left_ear: Optional[Point2] = None
    right_ear: Optional[Point2] = None
    left_eye: Optional[Point2] = Field(default=None, alias="leftEye")
    right_eye: Optional[Point2] = Field(default=None, alias="rightEye")

    @property
    def complete(self) -> bool:
        return None not in (self.left_ear, self.right_ear, self.left_eye, self.right_eye)

class CoordinateBridge:
    """
    The one piece of state shared between the detection side and the renderers.
    write() swaps the whole record in one assignment, so a reader either sees the
    previous frame's record or the new one, never a mix of the two.
    """
    def __init__(self):
        self._coords = Coordinates()
        self.frames = 0  # successful writes so far

    def read(self) -> Coordinates:
        return self._coords

    def write(self, coords: Coordinates) -> None:
        if not isinstance(coords, Coordinates):
            raise TypeError(f"CoordinateBridge.write expects Coordinates, got {type(coords).__name__}")
        self._coords = coords
        self.frames += 1
