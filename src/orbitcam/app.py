from __future__ import annotations

import logging
from pathlib import Path

from direct.gui.OnscreenText import OnscreenText
from direct.showbase.ShowBase import ShowBase
from direct.task import Task
from panda3d.core import (
    AmbientLight,
    DirectionalLight,
    LineSegs,
    LVector4,
    TextNode,
    loadPrcFileData,
)

from orbitcam.app_config import RunConfig
from orbitcam.common.error_log import ErrorLog
from orbitcam.config import load_settings
from orbitcam.host import OrbitCamHost
from orbitcam.orbit_camera import OrbitCameraState

logger = logging.getLogger(__name__)


class OrbitCamDemoApp(ShowBase):
    def __init__(self, cfg: RunConfig) -> None:
        # Keep audio from being a dependency for smoke runs / CI.
        loadPrcFileData("", "audio-library-name null")
        if cfg.smoke:
            loadPrcFileData("", "window-type offscreen")

        super().__init__()
        self.disableMouse()
        self.cfg = cfg

        settings_path = Path(cfg.settings_path) if cfg.settings_path else None
        self.settings = load_settings(settings_path)
        error_path = Path(cfg.error_log_path) if cfg.error_log_path else None
        self.error_log = ErrorLog(persist_path=error_path)

        self._setup_scene()

        self.focus = self.render.attachNewNode("orbitcam.focus")
        self.host = OrbitCamHost(base=self, settings=self.settings, error_log=self.error_log)
        self.camera.reparentTo(self.focus)
        self.main_state = self.host.add_camera(self.camera)

        # Extra cameras share the input but orbit at their own radius.
        for i in range(max(0, int(cfg.extra_cameras))):
            marker = self.loader.loadModel("models/misc/xyzAxis")
            marker.reparentTo(self.focus)
            marker.setScale(0.2)
            self.host.add_camera(
                marker,
                OrbitCameraState.from_radius(1.0 + 0.5 * (i + 1), tuning=self.settings.damping),
            )

        self._setup_ui()
        self.taskMgr.add(self._hud_task, "orbitcam.hud", sort=10)

        if cfg.smoke:
            self._frames_left = max(1, int(cfg.smoke_frames))
            self.taskMgr.add(self._smoke_task, "orbitcam.smoke-exit")

    def _setup_scene(self) -> None:
        model = self.loader.loadModel("models/box")
        model.reparentTo(self.render)
        model.setPos(-0.5, -0.5, -0.5)

        grid = LineSegs("orbitcam.grid")
        grid.setColor(0.35, 0.35, 0.4, 1.0)
        for i in range(-10, 11):
            grid.moveTo(float(i), -10.0, 0.0)
            grid.drawTo(float(i), 10.0, 0.0)
            grid.moveTo(-10.0, float(i), 0.0)
            grid.drawTo(10.0, float(i), 0.0)
        self.render.attachNewNode(grid.create())

        ambient = AmbientLight("ambient")
        ambient.setColor(LVector4(0.3, 0.3, 0.3, 1))
        self.render.setLight(self.render.attachNewNode(ambient))

        sun = DirectionalLight("sun")
        sun.setColor(LVector4(0.9, 0.9, 0.9, 1))
        sun_np = self.render.attachNewNode(sun)
        sun_np.setHpr(45, -45, 0)
        self.render.setLight(sun_np)

    def _setup_ui(self) -> None:
        b = self.settings.bindings
        self._help_text = OnscreenText(
            text=(
                f"Pan {b.forward}/{b.left}/{b.backward}/{b.right} | "
                f"Rotate {b.rotate_cw}/{b.rotate_ccw} | Tilt {b.tilt_up}/{b.tilt_down} | "
                f"Zoom wheel, {b.zoom_in}/{b.zoom_out}"
            ),
            parent=self.aspect2d,
            pos=(-1.32, 0.92),
            align=TextNode.ALeft,
            scale=0.04,
            fg=(1, 1, 1, 1),
            shadow=(0, 0, 0, 0.6),
        )
        self._state_text = OnscreenText(
            text="",
            parent=self.aspect2d,
            pos=(-1.32, 0.86),
            align=TextNode.ALeft,
            scale=0.04,
            fg=(0.8, 0.9, 1, 1),
            shadow=(0, 0, 0, 0.6),
        )

    def _hud_task(self, task: Task) -> int:
        lines = [self.main_state.describe()]
        latest = self.error_log.latest()
        if latest is not None:
            lines.append(f"[ERROR] {latest.summary_line()}")
        self._state_text.setText("\n".join(lines))
        return Task.cont

    def _smoke_task(self, task: Task) -> int:
        self._frames_left -= 1
        if self._frames_left <= 0:
            logger.info("orbitcam smoke run done after %d ticks: %s", self.host.tick, self.main_state.describe())
            self.userExit()
            return Task.done
        return Task.cont


def run(cfg: RunConfig) -> None:
    app = OrbitCamDemoApp(cfg)
    app.run()
