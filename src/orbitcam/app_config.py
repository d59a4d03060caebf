from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RunConfig:
    smoke: bool = False
    # Frames to render before exiting in smoke mode.
    smoke_frames: int = 8
    # Optional settings JSON; None means ~/.irun/orbitcam/settings.json (or ORBITCAM_CONFIG_DIR).
    settings_path: str | None = None
    # Extra orbit cameras driven alongside the main one (shown as markers).
    extra_cameras: int = 0
    # Optional file that receives per-frame errors in addition to the log.
    error_log_path: str | None = None
