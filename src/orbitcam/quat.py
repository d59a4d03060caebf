from __future__ import annotations

import math

from panda3d.core import LQuaternionf, LVector3f


# Canonical orbit basis: Y is vertical, the arm rests along +Z, pitch turns around X.
def vertical_axis() -> LVector3f:
    return LVector3f(0.0, 1.0, 0.0)


def arm_axis() -> LVector3f:
    return LVector3f(0.0, 0.0, 1.0)


def pitch_axis() -> LVector3f:
    return LVector3f(1.0, 0.0, 0.0)


def identity() -> LQuaternionf:
    return LQuaternionf(1.0, 0.0, 0.0, 0.0)


def from_axis_angle(axis: LVector3f, angle_rad: float) -> LQuaternionf:
    q = LQuaternionf()
    q.setFromAxisAngleRad(float(angle_rad), LVector3f(axis))
    return q


def rot_x(angle_rad: float) -> LQuaternionf:
    return from_axis_angle(pitch_axis(), angle_rad)


def rot_y(angle_rad: float) -> LQuaternionf:
    return from_axis_angle(vertical_axis(), angle_rad)


def from_scaled_axis(axis: LVector3f) -> LQuaternionf:
    """Rotation of ``|axis|`` radians around ``axis``; identity for a zero vector."""

    angle = float(LVector3f(axis).length())
    if angle <= 0.0:
        return identity()
    return from_axis_angle(LVector3f(axis) / angle, angle)


def then(first: LQuaternionf, second: LQuaternionf) -> LQuaternionf:
    """
    Compose two rotations: ``first`` is applied, then ``second``.

    Panda3D multiplies quaternions in row-vector order, so ``a * b`` already
    means "a, then b". This helper keeps call sites explicit about it.
    """

    return LQuaternionf(first * second)


def components(q: LQuaternionf) -> tuple[float, float, float, float]:
    return (float(q[0]), float(q[1]), float(q[2]), float(q[3]))


def norm(q: LQuaternionf) -> float:
    r, i, j, k = components(q)
    return math.sqrt(r * r + i * i + j * j + k * k)


def normalized(q: LQuaternionf) -> LQuaternionf:
    length = norm(q)
    if length <= 1e-12:
        return identity()
    r, i, j, k = components(q)
    return LQuaternionf(r / length, i / length, j / length, k / length)


def slerp(a: LQuaternionf, b: LQuaternionf, t: float) -> LQuaternionf:
    """Shortest-arc interpolation from ``a`` toward ``b``; the result is unit length."""

    tt = max(0.0, min(1.0, float(t)))
    ar, ai, aj, ak = components(a)
    br, bi, bj, bk = components(b)
    d = ar * br + ai * bi + aj * bj + ak * bk
    if d < 0.0:
        # q and -q are the same rotation; take the short way round.
        br, bi, bj, bk = -br, -bi, -bj, -bk
        d = -d

    if d > 0.9995:
        # Nearly parallel: plain lerp is stable and the renormalize below absorbs the error.
        s0 = 1.0 - tt
        s1 = tt
    else:
        theta = math.acos(min(1.0, d))
        sin_theta = math.sin(theta)
        s0 = math.sin((1.0 - tt) * theta) / sin_theta
        s1 = math.sin(tt * theta) / sin_theta

    return normalized(
        LQuaternionf(
            s0 * ar + s1 * br,
            s0 * ai + s1 * bi,
            s0 * aj + s1 * bj,
            s0 * ak + s1 * bk,
        )
    )


def angle_between(a: LQuaternionf, b: LQuaternionf) -> float:
    """Rotation angle (radians) separating two orientations."""

    aw, ax, ay, az = components(normalized(a))
    bw, bx, by, bz = components(normalized(b))
    # conj(a) * b; atan2 keeps precision near zero where acos(dot) does not.
    w = aw * bw + ax * bx + ay * by + az * bz
    vx = aw * bx - bw * ax - (ay * bz - az * by)
    vy = aw * by - bw * ay - (az * bx - ax * bz)
    vz = aw * bz - bw * az - (ax * by - ay * bx)
    return 2.0 * math.atan2(math.sqrt(vx * vx + vy * vy + vz * vz), abs(w))


def xform(q: LQuaternionf, v: LVector3f) -> LVector3f:
    return LVector3f(q.xform(LVector3f(v)))


__all__ = [
    "angle_between",
    "arm_axis",
    "components",
    "from_axis_angle",
    "from_scaled_axis",
    "identity",
    "norm",
    "normalized",
    "pitch_axis",
    "rot_x",
    "rot_y",
    "slerp",
    "then",
    "vertical_axis",
    "xform",
]
