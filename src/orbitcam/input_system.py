from __future__ import annotations

from panda3d.core import ButtonHandle, KeyboardButton

from orbitcam.config import OrbitCamConfig
from orbitcam.input_mapper import InputFrame, ScrollEvent, ScrollUnit


def is_key_down(watcher, key_name: str) -> bool:
    if watcher is None:
        return False
    k = (key_name or "").lower().strip()
    if not k:
        return False
    if k in {"space", "spacebar"}:
        return bool(watcher.isButtonDown(KeyboardButton.space()))
    if len(k) == 1 and ord(k) < 128:
        # ASCII key (layout-dependent) + raw key (layout-independent).
        if watcher.isButtonDown(KeyboardButton.ascii_key(k)):
            return True
        return bool(watcher.isButtonDown(ButtonHandle(f"raw-{k}")))
    return bool(watcher.isButtonDown(ButtonHandle(k)))


def held_actions(watcher, config: OrbitCamConfig) -> frozenset[str]:
    if watcher is None:
        return frozenset()
    return frozenset(action for action, key in config.bindings().items() if is_key_down(watcher, key))


class ScrollAccumulator:
    """Collects wheel events between ticks; the host drains it once per frame."""

    def __init__(self) -> None:
        self._pending: list[ScrollEvent] = []

    def push(self, unit: ScrollUnit, y: float) -> None:
        self._pending.append(ScrollEvent(unit=unit, y=float(y)))

    def wheel_up(self) -> None:
        self.push(ScrollUnit.LINE, 1.0)

    def wheel_down(self) -> None:
        self.push(ScrollUnit.LINE, -1.0)

    def pending(self) -> int:
        return len(self._pending)

    def drain(self) -> tuple[ScrollEvent, ...]:
        events = tuple(self._pending)
        self._pending.clear()
        return events


def sample_input_frame(watcher, config: OrbitCamConfig, scroll: ScrollAccumulator) -> InputFrame:
    return InputFrame(held=held_actions(watcher, config), scroll=scroll.drain())


__all__ = [
    "ScrollAccumulator",
    "held_actions",
    "is_key_down",
    "sample_input_frame",
]
