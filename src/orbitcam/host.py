from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from direct.showbase.ShowBaseGlobal import globalClock
from direct.task import Task
from panda3d.core import LQuaternionf, LVector3f, NodePath

from orbitcam import quat
from orbitcam.common.error_log import ErrorLog
from orbitcam.config import OrbitCamSettings
from orbitcam.input_mapper import InputFrame, update_targets
from orbitcam.input_system import ScrollAccumulator, sample_input_frame
from orbitcam.orbit_camera import OrbitCameraState, Pose

logger = logging.getLogger(__name__)


def _basis_to_panda() -> LQuaternionf:
    # Y-up/-Z-forward -> Panda3D Z-up/+Y-forward: (x, y, z) -> (x, -z, y).
    return quat.rot_x(math.pi / 2.0)


def to_panda_pose(pose: Pose) -> tuple[LVector3f, LQuaternionf]:
    c = _basis_to_panda()
    c_inv = LQuaternionf(c.conjugate())
    pos = quat.xform(c, pose.position)
    rot = quat.normalized(quat.then(quat.then(c_inv, pose.orientation), c))
    return pos, rot


def apply_pose(node_path: NodePath, pose: Pose) -> None:
    """Write a pose onto ``node_path`` relative to its parent (the orbit focus)."""

    pos, rot = to_panda_pose(pose)
    node_path.setPos(pos)
    node_path.setQuat(rot)


@dataclass
class _CameraBinding:
    node_path: NodePath
    state: OrbitCameraState
    last_pose: Pose | None = None


class OrbitCamHost:
    """
    Per-frame driver for a set of orbit cameras on a ShowBase-like host.

    Each tick: sample held keys and wheel events, move every camera's targets,
    then drive each camera and write its pose onto its NodePath.
    """

    def __init__(
        self,
        *,
        base,
        settings: OrbitCamSettings | None = None,
        error_log: ErrorLog | None = None,
        task_name: str = "orbitcam.update",
        start_task: bool = True,
    ) -> None:
        self.base = base
        self.settings = settings or OrbitCamSettings()
        self.error_log = error_log or ErrorLog()
        self.scroll = ScrollAccumulator()
        self.tick = 0
        self._task_name = str(task_name)
        self._cameras: list[_CameraBinding] = []

        self._bind_inputs()
        if start_task:
            self.base.taskMgr.add(self._task, self._task_name)

    def _bind_inputs(self) -> None:
        self.base.accept("wheel_up", self.scroll.wheel_up)
        self.base.accept("wheel_down", self.scroll.wheel_down)

    def destroy(self) -> None:
        self.base.ignore("wheel_up")
        self.base.ignore("wheel_down")
        self.base.taskMgr.remove(self._task_name)
        self._cameras.clear()

    def add_camera(self, node_path: NodePath, state: OrbitCameraState | None = None) -> OrbitCameraState:
        for binding in self._cameras:
            if binding.node_path == node_path:
                raise ValueError(f"camera node {node_path.getName()!r} is already managed")
        st = state if state is not None else OrbitCameraState(tuning=self.settings.damping)
        self._cameras.append(_CameraBinding(node_path=node_path, state=st))
        logger.debug("orbitcam: managing %s", node_path.getName())
        return st

    def remove_camera(self, node_path: NodePath) -> bool:
        before = len(self._cameras)
        self._cameras = [b for b in self._cameras if b.node_path != node_path]
        return len(self._cameras) != before

    def cameras(self) -> list[OrbitCameraState]:
        return [b.state for b in self._cameras]

    def last_pose(self, node_path: NodePath) -> Pose | None:
        for binding in self._cameras:
            if binding.node_path == node_path:
                return binding.last_pose
        return None

    def step(self, *, dt: float, frame: InputFrame) -> list[Pose]:
        frame_dt = max(0.0, float(dt))
        update_targets(frame=frame, cameras=self.cameras(), tuning=self.settings.input)

        poses: list[Pose] = []
        for binding in self._cameras:
            pose = binding.state.drive(frame_dt)
            apply_pose(binding.node_path, pose)
            binding.last_pose = pose
            poses.append(pose)
        self.tick += 1
        return poses

    def _task(self, task: Task) -> int:
        try:
            dt = float(globalClock.getDt())
            watcher = getattr(self.base, "mouseWatcherNode", None)
            frame = sample_input_frame(watcher, self.settings.bindings, self.scroll)
            self.step(dt=dt, frame=frame)
        except Exception as exc:
            # Never hard-crash the frame loop; the feed de-duplicates repeats.
            self.error_log.log_exception(context="orbitcam.update", exc=exc, tick=self.tick)
        return Task.cont


__all__ = ["OrbitCamHost", "apply_pose", "to_panda_pose"]
