from __future__ import annotations

from orbitcam.config import DampingTuning, InputTuning, OrbitCamConfig, OrbitCamSettings
from orbitcam.damping import DampedRotation, DampedScalar
from orbitcam.input_mapper import InputFrame, ScrollEvent, ScrollUnit, update_targets
from orbitcam.orbit_camera import OrbitCameraState, Pose

__all__ = [
    "DampedRotation",
    "DampedScalar",
    "DampingTuning",
    "InputFrame",
    "InputTuning",
    "OrbitCamConfig",
    "OrbitCamSettings",
    "OrbitCameraState",
    "Pose",
    "ScrollEvent",
    "ScrollUnit",
    "__version__",
    "update_targets",
]

__version__ = "0.1.0"
