from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Iterable

from panda3d.core import LVector3f

from orbitcam import quat
from orbitcam.config import InputTuning
from orbitcam.orbit_camera import OrbitCameraState


class ScrollUnit(enum.Enum):
    LINE = "line"
    PIXEL = "pixel"


@dataclass(frozen=True)
class ScrollEvent:
    unit: ScrollUnit
    y: float


@dataclass(frozen=True)
class InputFrame:
    """One tick of input: logical actions currently held plus wheel events since the last tick."""

    held: frozenset[str] = field(default_factory=frozenset)
    scroll: tuple[ScrollEvent, ...] = ()

    def is_held(self, action: str) -> bool:
        return action in self.held


def pan_speed_scale(distance: float, *, max_speed: float = 0.04) -> float:
    """
    Saturating pan step for a camera at ``distance``.

    Logistic in sqrt(distance), rescaled to start at 0 and approach
    ``max_speed``: slow pans up close, bounded pans far away.
    """

    d = max(0.0, float(distance))
    logistic = 1.0 / (1.0 + math.exp(-math.sqrt(d)))
    return float(max_speed) * (logistic * 2.0 - 1.0)


def scroll_zoom_delta(events: Iterable[ScrollEvent], *, pixel_scale: float) -> float:
    delta = 0.0
    for ev in events:
        if ev.unit is ScrollUnit.PIXEL:
            delta += float(ev.y) * float(pixel_scale)
        else:
            delta += float(ev.y)
    return delta


def update_targets(
    *,
    frame: InputFrame,
    cameras: Iterable[OrbitCameraState],
    tuning: InputTuning | None = None,
) -> None:
    """Move the targets (never the current values) of every camera from one tick of input."""

    t = tuning or InputTuning()

    yaw = 0.0
    pitch = 0.0
    if frame.is_held("tilt_up"):
        pitch -= 1.0
    if frame.is_held("tilt_down"):
        pitch += 1.0
    if frame.is_held("rotate_cw"):
        yaw += 1.0
    if frame.is_held("rotate_ccw"):
        yaw -= 1.0
    yaw *= float(t.yaw_per_tick)
    pitch *= float(t.pitch_per_tick)

    delta_zoom = scroll_zoom_delta(frame.scroll, pixel_scale=t.pixel_scroll_scale)
    if frame.is_held("zoom_out"):
        delta_zoom += float(t.zoom_key_step)
    elif frame.is_held("zoom_in"):
        delta_zoom -= float(t.zoom_key_step)

    right = 0.0
    fwd = 0.0
    if frame.is_held("right"):
        right -= 1.0
    if frame.is_held("left"):
        right += 1.0
    if frame.is_held("forward"):
        fwd -= 1.0
    if frame.is_held("backward"):
        fwd += 1.0

    for cam in cameras:
        cam.distance.target = max(0.0, cam.distance.target * (1.0 + delta_zoom * float(t.zoom_gain)))
        if yaw != 0.0:
            cam.up.target = quat.then(quat.rot_y(yaw), cam.up.target)
        cam.inclination.target = max(0.0, min(math.pi / 2.0, cam.inclination.target + pitch))

        speed = pan_speed_scale(cam.distance.current, max_speed=t.pan_max_speed)
        axis = quat.vertical_axis().cross(LVector3f(right * -speed, 0.0, fwd * speed))
        if axis.length() == 0.0:
            # No pan this tick for this camera; the others still get theirs.
            continue
        cam.up.target = quat.then(quat.from_scaled_axis(axis), cam.up.target)


__all__ = [
    "InputFrame",
    "ScrollEvent",
    "ScrollUnit",
    "pan_speed_scale",
    "scroll_zoom_delta",
    "update_targets",
]
