"""Orbit camera settings: key bindings, input gains and damping rates.

Persisted at ~/.irun/orbitcam/settings.json (override the directory with
ORBITCAM_CONFIG_DIR). Loading never raises: unreadable files fall back to
defaults and individual bad values are reset with a warning.
"""

from __future__ import annotations

import json
import logging
import math
import os
import secrets
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


ACTIONS: tuple[str, ...] = (
    "forward",
    "backward",
    "left",
    "right",
    "rotate_cw",
    "rotate_ccw",
    "tilt_up",
    "tilt_down",
    "zoom_in",
    "zoom_out",
)


@dataclass(frozen=True)
class OrbitCamConfig:
    """Logical action -> Panda3D button name. Duplicate bindings are not validated."""

    forward: str = "w"
    left: str = "a"
    right: str = "d"
    backward: str = "s"
    rotate_cw: str = "arrow_left"
    rotate_ccw: str = "arrow_right"
    tilt_up: str = "arrow_up"
    tilt_down: str = "arrow_down"
    zoom_in: str = "lshift"
    zoom_out: str = "space"

    def bindings(self) -> dict[str, str]:
        return {action: str(getattr(self, action)) for action in ACTIONS}


@dataclass
class InputTuning:
    # Per-tick angular steps (radians) while a rotate/tilt key is held.
    yaw_per_tick: float = 0.05
    pitch_per_tick: float = 0.08
    # Pixel-unit wheel deltas are much larger than line-unit ones.
    pixel_scroll_scale: float = 0.1
    zoom_key_step: float = 0.2
    # distance.target *= 1 + delta_zoom * zoom_gain
    zoom_gain: float = 0.2
    # Asymptotic pan step (radians per tick) for far-away cameras.
    pan_max_speed: float = 0.04


@dataclass
class DampingTuning:
    # Response rates in 1/s: alpha = 1 - exp(-hz * dt).
    rotate_hz: float = 8.0
    angle_hz: float = 10.0
    zoom_hz: float = 6.0
    # Height/floor tracks respond at radius * this rate.
    translate_hz_per_radius: float = 6.0


@dataclass
class OrbitCamSettings:
    bindings: OrbitCamConfig = field(default_factory=OrbitCamConfig)
    input: InputTuning = field(default_factory=InputTuning)
    damping: DampingTuning = field(default_factory=DampingTuning)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "OrbitCamSettings":
        bindings_payload = payload.get("bindings")
        input_payload = payload.get("input")
        damping_payload = payload.get("damping")
        return cls(
            bindings=_bindings_from_payload(bindings_payload if isinstance(bindings_payload, dict) else {}),
            input=_floats_from_payload(InputTuning(), input_payload if isinstance(input_payload, dict) else {}),
            damping=_floats_from_payload(DampingTuning(), damping_payload if isinstance(damping_payload, dict) else {}),
        )


_NAMED_KEYS = {
    "space",
    "tab",
    "enter",
    "escape",
    "backspace",
    "shift",
    "lshift",
    "rshift",
    "control",
    "lcontrol",
    "rcontrol",
    "alt",
    "lalt",
    "ralt",
    "arrow_left",
    "arrow_right",
    "arrow_up",
    "arrow_down",
    "page_up",
    "page_down",
    "home",
    "end",
    "insert",
    "delete",
}


def normalize_bind_key(key: str) -> str | None:
    k = (key or "").strip().lower()
    if not k:
        return None
    aliases = {
        "spacebar": "space",
        "left": "arrow_left",
        "right": "arrow_right",
        "up": "arrow_up",
        "down": "arrow_down",
        "left_shift": "lshift",
        "shift_left": "lshift",
        "right_shift": "rshift",
        "shift_right": "rshift",
        "grave": "`",
        "backquote": "`",
    }
    if k in aliases:
        return aliases[k]
    if len(k) == 1 and ord(k) < 128:
        return k
    if k in _NAMED_KEYS:
        return k
    if k.startswith("f") and k[1:].isdigit() and 1 <= int(k[1:]) <= 12:
        return k
    return None


def _bindings_from_payload(payload: dict[str, Any]) -> OrbitCamConfig:
    defaults = OrbitCamConfig()
    kwargs: dict[str, str] = {}
    for action in ACTIONS:
        if action not in payload:
            continue
        raw = payload[action]
        key = normalize_bind_key(raw) if isinstance(raw, str) else None
        if key is None:
            logger.warning("Invalid key binding %s=%r; using default %r.", action, raw, getattr(defaults, action))
            continue
        kwargs[action] = key
    return replace(defaults, **kwargs)


def _floats_from_payload(defaults, payload: dict[str, Any]):
    kwargs: dict[str, float] = {}
    for fld in fields(defaults):
        if fld.name not in payload:
            continue
        raw = payload[fld.name]
        if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
            logger.warning("Ignoring non-numeric setting %s=%r.", fld.name, raw)
            continue
        try:
            val = float(raw)
        except ValueError:
            logger.warning("Ignoring non-numeric setting %s=%r.", fld.name, raw)
            continue
        if not math.isfinite(val) or val < 0.0:
            logger.warning("Out-of-range setting %s=%r; using default.", fld.name, raw)
            continue
        kwargs[fld.name] = val
    return replace(defaults, **kwargs)


# ── persistence ──────────────────────────────────────────────


def _config_dir() -> Path:
    override = os.environ.get("ORBITCAM_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".irun" / "orbitcam"


def settings_path() -> Path:
    return _config_dir() / "settings.json"


def load_settings(path: Path | None = None) -> OrbitCamSettings:
    p = Path(path) if path is not None else settings_path()
    if not p.exists():
        return OrbitCamSettings()
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Could not read %s (%s); using default settings.", p, exc)
        return OrbitCamSettings()
    if not isinstance(raw, dict):
        logger.warning("Settings file %s is not a JSON object; using defaults.", p)
        return OrbitCamSettings()
    return OrbitCamSettings.from_dict(raw)


def save_settings(settings: OrbitCamSettings, path: Path | None = None) -> Path:
    p = Path(path) if path is not None else settings_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_name(f"{p.name}.{os.getpid()}.{secrets.token_hex(4)}.tmp")
    tmp.write_text(
        json.dumps(settings.to_dict(), indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    tmp.replace(p)
    return p


__all__ = [
    "ACTIONS",
    "DampingTuning",
    "InputTuning",
    "OrbitCamConfig",
    "OrbitCamSettings",
    "load_settings",
    "normalize_bind_key",
    "save_settings",
    "settings_path",
]
