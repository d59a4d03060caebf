from __future__ import annotations

from dataclasses import dataclass

from panda3d.core import LQuaternionf, LVector3f

from orbitcam import quat
from orbitcam.config import DampingTuning
from orbitcam.damping import DampedRotation, DampedScalar


DEFAULT_DISTANCE = 4.0
DEFAULT_FLOOR = 0.01


@dataclass(frozen=True)
class Pose:
    """Camera transform in the canonical Y-up basis (camera looks down -Z)."""

    position: LVector3f
    orientation: LQuaternionf


def local_position(*, inclination: float, distance: float, height: float, min_radius: float) -> LVector3f:
    """
    Un-rotated camera offset from the focal point.

    When the offset falls inside ``min_radius`` it is pushed up along Y by the
    shortfall, once. The horizontal components are never touched and the
    result is not re-measured, so steep tilts can still land slightly short.
    """

    arm = quat.xform(quat.rot_x(-float(inclination)), quat.arm_axis()) * float(distance)
    pos = quat.vertical_axis() * float(height) + arm
    pos_len = float(pos.length())
    if pos_len < float(min_radius):
        pos.y += float(min_radius) - pos_len
    return pos


class OrbitCameraState:
    """Five independently smoothed orbit parameters for one camera."""

    def __init__(self, radius: float = 1.0, *, tuning: DampingTuning | None = None) -> None:
        t = tuning or DampingTuning()
        self.up = DampedRotation.rotate(quat.identity(), tuning=t)
        self.inclination = DampedScalar.angle(0.0, tuning=t)
        self.distance = DampedScalar.zoom(DEFAULT_DISTANCE, tuning=t)
        self.target_height = DampedScalar.translate(DEFAULT_FLOOR, radius=radius, tuning=t)
        self.min_radius = DampedScalar.translate(DEFAULT_FLOOR, radius=radius, tuning=t)

    @classmethod
    def from_radius(cls, radius: float, *, tuning: DampingTuning | None = None) -> "OrbitCameraState":
        return cls(float(radius), tuning=tuning)

    def drive(self, dt: float) -> Pose:
        up = self.up.advance(dt)
        incl = self.inclination.advance(dt)
        dist = self.distance.advance(dt)
        height = self.target_height.advance(dt)
        floor = self.min_radius.advance(dt)

        pos = local_position(inclination=incl, distance=dist, height=height, min_radius=floor)
        # Pitch first, then the orbit-plane rotation.
        orientation = quat.normalized(quat.then(quat.rot_x(-incl), up))
        return Pose(position=quat.xform(up, pos), orientation=orientation)

    def snap(self) -> Pose:
        """Jump every value to its target and return the resulting pose."""

        self.up.snap()
        self.inclination.snap()
        self.distance.snap()
        self.target_height.snap()
        self.min_radius.snap()
        return self.drive(0.0)

    def describe(self) -> str:
        return (
            f"incl={self.inclination.current:.3f}->{self.inclination.target:.3f} "
            f"dist={self.distance.current:.3f}->{self.distance.target:.3f} "
            f"height={self.target_height.current:.3f} "
            f"min={self.min_radius.current:.3f} "
            f"up_err={quat.angle_between(self.up.current, self.up.target):.4f}"
        )


__all__ = ["DEFAULT_DISTANCE", "DEFAULT_FLOOR", "OrbitCameraState", "Pose", "local_position"]
