from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Literal, Optional

from floorgrid.core.config import DEFAULT_CONFIG
from floorgrid.core.coordinates import GridPoint


# Channels.
GRID_MOVE = "grid:move"
GRID_CLICK = "grid:click"
GRID_DOUBLE_CLICK = "grid:double-click"
GRID_LEAVE = "grid:leave"
POINTER_MOVE = "pointermove"
POINTER_UP = "pointerup"

PointerKind = Literal["move", "down", "up", "click", "double_click", "enter", "leave"]


@dataclass(frozen=True)
class PointerEvent:
    kind: PointerKind
    position: GridPoint = (0.0, 0.0)
    shift: bool = False  # snap to grid / 45 degrees
    alt: bool = False  # fine step
    time: float = 0.0  # seconds


Listener = Callable[[PointerEvent], None]


class EventSource:
    """Synchronous pointer event fan-out keyed by channel name."""

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def on(self, channel: str, listener: Listener) -> Callable[[], None]:
        self._listeners.setdefault(channel, []).append(listener)
        return lambda: self.off(channel, listener)

    def off(self, channel: str, listener: Listener) -> None:
        handlers = self._listeners.get(channel, [])
        if listener in handlers:
            handlers.remove(listener)
        if not handlers:
            self._listeners.pop(channel, None)

    def emit(self, channel: str, event: PointerEvent) -> int:
        handlers = list(self._listeners.get(channel, []))
        for fn in handlers:
            fn(event)
        return len(handlers)

    def listener_count(self, channel: Optional[str] = None) -> int:
        if channel is not None:
            return len(self._listeners.get(channel, []))
        return sum(len(v) for v in self._listeners.values())


class DoubleClickDetector:
    """Turns timed clicks into double clicks when two land within ``window`` seconds."""

    def __init__(self, window: float = DEFAULT_CONFIG.double_click_window) -> None:
        if window <= 0.0:
            raise ValueError("double click window must be > 0")
        self.window = float(window)
        self._last: Optional[float] = None

    def feed(self, event: PointerEvent) -> PointerEvent:
        if event.kind != "click":
            return event
        if self._last is not None and 0.0 <= event.time - self._last <= self.window:
            self._last = None
            return PointerEvent("double_click", event.position, event.shift, event.alt, event.time)
        self._last = event.time
        return event

    def reset(self) -> None:
        self._last = None
