from __future__ import annotations
import yaml
from pathlib import Path
from typing import Literal, Optional
from pydantic import BaseModel, Field, ValidationError
from .pose.estimator import PoseParams

class ConfigError(ValueError):
    pass

class RotationConfig(BaseModel):
    strategy: Literal["direct", "hysteresis", "nose"] = "hysteresis"
    threshold: float = Field(0.02, ge=0.0)

class EyeLineConfig(BaseModel):
    span: float = Field(1.4, gt=0.0)

class PoseConfig(BaseModel):
    k_scale: float = 10.0
    k_depth: float = 8.0
    pitch_damping: float = 0.5
    position_gain: float = 10.0
    depth_gain: float = 5.0

    def params(self) -> PoseParams:
        return PoseParams(**self.model_dump())

class DetectorConfig(BaseModel):
    max_num_faces: int = Field(1, ge=1)
    refine_landmarks: bool = True
    min_detection_confidence: float = Field(0.5, ge=0.0, le=1.0)
    min_tracking_confidence: float = Field(0.5, ge=0.0, le=1.0)

class CaptureConfig(BaseModel):
    camera: int|str = 0
    width: int = 640
    height: int = 480
    mirror: bool = False

class EyewearConfig(BaseModel):
    rotation: RotationConfig = RotationConfig()
    eyeline: EyeLineConfig = EyeLineConfig()
    pose: PoseConfig = PoseConfig()
    detector: DetectorConfig = DetectorConfig()
    capture: CaptureConfig = CaptureConfig()

def load_config(path: str|Path|None) -> EyewearConfig:
    """YAML file -> config. A missing path gives the defaults."""
    if not path or not Path(path).exists():
        return EyewearConfig()
    with open(path, "r") as f:
        try:
            raw: Optional[dict] = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: invalid YAML: {e}") from e
    try:
        return EyewearConfig.model_validate(raw or {})
    except ValidationError as e:
        raise ConfigError(f"{path}: {e}") from e
