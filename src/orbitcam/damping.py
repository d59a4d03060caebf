from __future__ import annotations

import math

from panda3d.core import LQuaternionf

from orbitcam import quat
from orbitcam.config import DampingTuning


def response_alpha(*, hz: float, dt: float) -> float:
    """
    Fraction of the remaining gap closed over ``dt`` seconds.

    Exponential in ``dt``, so one step of ``dt`` equals two steps of ``dt / 2``
    and the approach curve is the same at any frame rate.
    """

    frame_dt = max(0.0, float(dt))
    rate = max(0.0, float(hz))
    if frame_dt <= 0.0 or rate <= 0.0:
        return 0.0
    alpha = 1.0 - math.exp(-rate * frame_dt)
    return max(0.0, min(1.0, alpha))


class DampedScalar:
    """Scalar that approaches a mutable target at a fixed response rate."""

    __slots__ = ("current", "target", "response_hz")

    def __init__(self, value: float, *, response_hz: float) -> None:
        self.current = float(value)
        self.target = float(value)
        self.response_hz = max(0.0, float(response_hz))

    @classmethod
    def angle(cls, value: float, *, tuning: DampingTuning | None = None) -> "DampedScalar":
        t = tuning or DampingTuning()
        return cls(value, response_hz=t.angle_hz)

    @classmethod
    def zoom(cls, value: float, *, tuning: DampingTuning | None = None) -> "DampedScalar":
        t = tuning or DampingTuning()
        return cls(value, response_hz=t.zoom_hz)

    @classmethod
    def translate(cls, value: float, *, radius: float, tuning: DampingTuning | None = None) -> "DampedScalar":
        t = tuning or DampingTuning()
        return cls(value, response_hz=float(t.translate_hz_per_radius) * max(0.0, float(radius)))

    def advance(self, dt: float) -> float:
        alpha = response_alpha(hz=self.response_hz, dt=dt)
        if alpha > 0.0:
            self.current += (self.target - self.current) * alpha
        return self.current

    def snap(self) -> float:
        self.current = self.target
        return self.current

    def at_target(self, *, tol: float = 1e-6) -> bool:
        return abs(self.target - self.current) <= float(tol)

    def __repr__(self) -> str:
        return f"DampedScalar(current={self.current:.4f}, target={self.target:.4f}, hz={self.response_hz:.2f})"


class DampedRotation:
    """Unit quaternion that slerps toward a mutable target along the shortest arc."""

    __slots__ = ("_current", "_target", "response_hz")

    def __init__(self, value: LQuaternionf, *, response_hz: float) -> None:
        self._current = quat.normalized(value)
        self._target = quat.normalized(value)
        self.response_hz = max(0.0, float(response_hz))

    @classmethod
    def rotate(cls, value: LQuaternionf, *, tuning: DampingTuning | None = None) -> "DampedRotation":
        t = tuning or DampingTuning()
        return cls(value, response_hz=t.rotate_hz)

    @property
    def current(self) -> LQuaternionf:
        return LQuaternionf(self._current)

    @current.setter
    def current(self, value: LQuaternionf) -> None:
        self._current = quat.normalized(value)

    @property
    def target(self) -> LQuaternionf:
        return LQuaternionf(self._target)

    @target.setter
    def target(self, value: LQuaternionf) -> None:
        # Every write is renormalized; composed rotations drift off the unit sphere.
        self._target = quat.normalized(value)

    def advance(self, dt: float) -> LQuaternionf:
        alpha = response_alpha(hz=self.response_hz, dt=dt)
        if alpha > 0.0:
            self._current = quat.slerp(self._current, self._target, alpha)
        return self.current

    def snap(self) -> LQuaternionf:
        self._current = LQuaternionf(self._target)
        return self.current

    def at_target(self, *, tol: float = 1e-6) -> bool:
        return quat.angle_between(self._current, self._target) <= float(tol)

    def __repr__(self) -> str:
        return f"DampedRotation(angle_to_target={quat.angle_between(self._current, self._target):.4f}, hz={self.response_hz:.2f})"


__all__ = ["DampedRotation", "DampedScalar", "response_alpha"]
