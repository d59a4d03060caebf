from __future__ import annotations

import math

from orbitcam import quat
from orbitcam.config import InputTuning
from orbitcam.input_mapper import (
    InputFrame,
    ScrollEvent,
    ScrollUnit,
    pan_speed_scale,
    scroll_zoom_delta,
    update_targets,
)
from orbitcam.orbit_camera import OrbitCameraState


def _held(*actions: str) -> InputFrame:
    return InputFrame(held=frozenset(actions))


def test_line_scroll_zooms_multiplicatively() -> None:
    cam = OrbitCameraState()
    frame = InputFrame(scroll=(ScrollEvent(unit=ScrollUnit.LINE, y=1.0),))
    update_targets(frame=frame, cameras=[cam])
    assert math.isclose(cam.distance.target, 4.8)


def test_pixel_scroll_is_scaled_down() -> None:
    events = [ScrollEvent(unit=ScrollUnit.PIXEL, y=10.0), ScrollEvent(unit=ScrollUnit.LINE, y=-0.5)]
    assert math.isclose(scroll_zoom_delta(events, pixel_scale=0.1), 0.5)


def test_zoom_keys_and_zoom_out_wins_when_both_held() -> None:
    cam = OrbitCameraState()
    update_targets(frame=_held("zoom_out"), cameras=[cam])
    assert math.isclose(cam.distance.target, 4.0 * 1.04)

    cam2 = OrbitCameraState()
    update_targets(frame=_held("zoom_in", "zoom_out"), cameras=[cam2])
    assert math.isclose(cam2.distance.target, 4.0 * 1.04)

    cam3 = OrbitCameraState()
    update_targets(frame=_held("zoom_in"), cameras=[cam3])
    assert math.isclose(cam3.distance.target, 4.0 * 0.96)


def test_custom_zoom_gain_from_tuning() -> None:
    cam = OrbitCameraState()
    frame = InputFrame(scroll=(ScrollEvent(unit=ScrollUnit.LINE, y=1.0),))
    update_targets(frame=frame, cameras=[cam], tuning=InputTuning(zoom_gain=0.5))
    assert math.isclose(cam.distance.target, 6.0)


def test_distance_target_never_goes_negative() -> None:
    cam = OrbitCameraState()
    frame = InputFrame(scroll=(ScrollEvent(unit=ScrollUnit.LINE, y=-20.0),))
    update_targets(frame=frame, cameras=[cam])
    assert cam.distance.target == 0.0


def test_inclination_saturates_at_both_ends() -> None:
    cam = OrbitCameraState()
    for _ in range(10000):
        update_targets(frame=_held("tilt_up"), cameras=[cam])
    assert cam.inclination.target == 0.0

    update_targets(frame=_held("tilt_down"), cameras=[cam])
    assert math.isclose(cam.inclination.target, 0.08)

    for _ in range(10000):
        update_targets(frame=_held("tilt_down"), cameras=[cam])
    assert cam.inclination.target == math.pi / 2.0


def test_rotate_cw_yaws_up_target_around_vertical() -> None:
    cam = OrbitCameraState()
    update_targets(frame=_held("rotate_cw"), cameras=[cam])
    assert quat.angle_between(cam.up.target, quat.rot_y(0.05)) < 1e-5

    update_targets(frame=_held("rotate_ccw"), cameras=[cam])
    assert quat.angle_between(cam.up.target, quat.identity()) < 1e-5


def test_no_pan_input_leaves_up_target_unchanged() -> None:
    cam = OrbitCameraState()
    cam.up.target = quat.rot_x(0.3)
    before = quat.components(cam.up.target)
    update_targets(frame=_held("tilt_down", "zoom_out"), cameras=[cam])
    assert quat.components(cam.up.target) == before


def test_update_targets_never_touches_current_values() -> None:
    cam = OrbitCameraState()
    frame = InputFrame(
        held=frozenset({"forward", "left", "rotate_cw", "tilt_down", "zoom_out"}),
        scroll=(ScrollEvent(unit=ScrollUnit.LINE, y=1.0),),
    )
    update_targets(frame=frame, cameras=[cam])
    assert cam.distance.current == 4.0
    assert cam.inclination.current == 0.0
    assert quat.angle_between(cam.up.current, quat.identity()) < 1e-7
    assert quat.angle_between(cam.up.target, quat.identity()) > 0.0


def test_forward_pan_swings_camera_over_the_top() -> None:
    cam = OrbitCameraState()
    update_targets(frame=_held("forward"), cameras=[cam])
    pose = cam.snap()
    assert pose.position.y > 0.01
    assert pose.position.z > 0.0


def test_camera_without_pan_speed_is_skipped_but_others_still_pan() -> None:
    parked = OrbitCameraState()
    parked.distance.current = 0.0
    parked.distance.target = 0.0
    roaming = OrbitCameraState()

    update_targets(frame=_held("forward"), cameras=[parked, roaming])

    assert quat.angle_between(parked.up.target, quat.identity()) < 1e-7
    assert quat.angle_between(roaming.up.target, quat.identity()) > 1e-4


def test_up_target_stays_unit_length_under_mixed_input() -> None:
    cam = OrbitCameraState()
    sequences = [
        ("forward", "rotate_cw"),
        ("left", "tilt_down"),
        ("backward", "right", "rotate_ccw"),
        ("forward", "left", "zoom_out"),
    ]
    for i in range(2000):
        update_targets(frame=_held(*sequences[i % len(sequences)]), cameras=[cam])
        cam.drive(1.0 / 60.0)
        assert math.isclose(quat.norm(cam.up.target), 1.0, abs_tol=1e-5)
        assert math.isclose(quat.norm(cam.up.current), 1.0, abs_tol=1e-5)


def test_pan_speed_scale_is_bounded_and_increasing() -> None:
    assert pan_speed_scale(0.0) == 0.0
    samples = [pan_speed_scale(d) for d in (0.01, 0.5, 4.0, 50.0, 1e6)]
    assert samples == sorted(samples)
    assert all(0.0 < s < 0.04 for s in samples[:-1])
    assert math.isclose(samples[-1], 0.04, rel_tol=1e-6)
    assert math.isclose(pan_speed_scale(4.0, max_speed=0.08), 2.0 * pan_speed_scale(4.0))
