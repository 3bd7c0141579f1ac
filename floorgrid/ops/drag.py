from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from dataclasses import asdict
from typing import Callable, Iterator, List, Literal, Optional, Tuple

from floorgrid.core.config import DEFAULT_CONFIG, EngineConfig
from floorgrid.ops.events import POINTER_MOVE, POINTER_UP, EventSource, PointerEvent
from floorgrid.ops.roof_ops import (
    base_centroid,
    drag_edge,
    drag_height,
    rotate_roof,
    snap_angle,
    snap_endpoints,
    snap_step,
    translate_roof,
    wrap_angle,
)
from floorgrid.project.history import UndoHistory
from floorgrid.project.schema import RoofSegment
from floorgrid.project.store import NodeStore

logger = logging.getLogger(__name__)


HandleKind = Literal[
    "ridge_height",
    "edge_front",
    "edge_back",
    "edge_left",
    "edge_right",
    "rotate",
    "translate_ridge",
    "translate_perp",
    "translate_free",
]

HANDLE_KINDS: Tuple[str, ...] = (
    "ridge_height",
    "edge_front",
    "edge_back",
    "edge_left",
    "edge_right",
    "rotate",
    "translate_ridge",
    "translate_perp",
    "translate_free",
)


class RoofDragSession:
    """One pointer drag on a roof handle.

    Pointer positions are points on the drag plane in metres: ``(x, z)`` on
    the ground plane for edge, rotation and translation handles, and
    ``(horizontal, y)`` on the camera-facing plane for ``ridge_height``, where
    only the vertical component is used. The first update only anchors the
    drag; every later update is computed from the record captured at the
    start plus the cumulative delta from the anchor.
    """

    def __init__(
        self,
        store: NodeStore,
        history: UndoHistory,
        roof_id: str,
        handle: HandleKind,
        *,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        if handle not in HANDLE_KINDS:
            raise ValueError(f"Unsupported roof handle: {handle!r}")
        original = store.get(roof_id)
        if not isinstance(original, RoofSegment):
            raise TypeError(f"Node {roof_id} is not a roof")
        self.store = store
        self.history = history
        self.roof_id = roof_id
        self.handle = handle
        self.config = config
        self.original = original
        self.current = original
        self._before = store.snapshot(label=f"roof:{handle}")
        self._anchor: Optional[Tuple[float, float]] = None
        self._pivot = base_centroid(original, config.tile_size)
        self._prev_angle = 0.0
        self._total_angle = 0.0
        self._unsubscribe: List[Callable[[], None]] = []
        self.closed = False
        logger.debug("roof drag start %s handle=%s", roof_id, handle)

    @property
    def changed(self) -> bool:
        return self.current != self.original

    def attach(self, events: EventSource) -> "RoofDragSession":
        """Listen for pointer moves and the releasing pointer-up until the drag ends."""
        self._ensure_open()
        self._unsubscribe.append(events.on(POINTER_MOVE, self._on_move))
        self._unsubscribe.append(events.on(POINTER_UP, self._on_up))
        return self

    def _on_move(self, event: PointerEvent) -> None:
        self.update(event.position, shift=event.shift, alt=event.alt)

    def _on_up(self, event: PointerEvent) -> None:
        self.finish()

    def _ensure_open(self) -> None:
        if self.closed:
            raise RuntimeError("Roof drag session already finished")

    def update(self, point: Tuple[float, float], *, shift: bool = False, alt: bool = False) -> RoofSegment:
        self._ensure_open()
        point = (float(point[0]), float(point[1]))
        if self._anchor is None:
            self._anchor = point
            if self.handle == "rotate" and self._pivot is not None:
                self._prev_angle = self._pointer_angle(point)
            return self.current

        updated = self._compute(point, shift=shift, alt=alt)
        if updated != self.current:
            self._write(updated)
        return self.current

    def _pointer_angle(self, point: Tuple[float, float]) -> float:
        assert self._pivot is not None
        return math.atan2(point[1] - self._pivot[1], point[0] - self._pivot[0])

    def _compute(self, point: Tuple[float, float], *, shift: bool, alt: bool) -> RoofSegment:
        cfg = self.config
        assert self._anchor is not None
        delta = (point[0] - self._anchor[0], point[1] - self._anchor[1])
        seg = self.original

        if self.handle == "ridge_height":
            return drag_height(
                seg,
                delta[1],
                min_height=cfg.roof_min_height,
                max_height=cfg.roof_max_height,
                step=snap_step(cfg.roof_height_step, shift=shift, alt=alt, config=cfg),
            )
        if self.handle.startswith("edge_"):
            return drag_edge(
                seg,
                self.handle[len("edge_"):],  # type: ignore[arg-type]
                delta,
                tile_size=cfg.tile_size,
                min_width=cfg.roof_min_width,
                step=snap_step(1.0, shift=shift, alt=alt, config=cfg),
            )
        if self.handle == "rotate":
            if self._pivot is None:
                return seg
            angle = self._pointer_angle(point)
            # Accumulate wrapped increments so crossing +-pi does not jump.
            self._total_angle += wrap_angle(angle - self._prev_angle)
            self._prev_angle = angle
            effective = self._total_angle
            step = snap_step(cfg.roof_rotation_step_deg, shift=shift, alt=alt, config=cfg)
            if step is not None:
                effective = snap_angle(effective, step)
            return rotate_roof(seg, effective, self._pivot, tile_size=cfg.tile_size)
        return translate_roof(
            seg,
            delta,
            self.handle[len("translate_"):],  # type: ignore[arg-type]
            tile_size=cfg.tile_size,
            step=snap_step(cfg.tile_size, shift=shift, alt=alt, config=cfg),
        )

    def _write(self, seg: RoofSegment) -> None:
        fields = asdict(seg)
        fields.pop("id")
        self.current = self.store.update(self.roof_id, **fields)  # type: ignore[assignment]

    def _teardown(self) -> None:
        callbacks, self._unsubscribe = self._unsubscribe, []
        for off in callbacks:
            off()
        self.closed = True

    def finish(self) -> bool:
        """End the drag; push one undo step if the roof changed. Returns whether it did."""
        self._ensure_open()
        try:
            if self.handle == "rotate" and self.changed:
                self._write(snap_endpoints(self.current, self.config.roof_release_precision))
            if not self.changed:
                logger.debug("roof drag %s ended without change", self.roof_id)
                return False
            self.history.push(self._before, label=f"roof:{self.handle}")
            logger.info("roof %s edited via %s", self.roof_id, self.handle)
            return True
        finally:
            self._teardown()

    def abort(self) -> None:
        """End the drag restoring the record captured at the start; records no undo step."""
        if self.closed:
            return
        try:
            if self.changed:
                self._write(self.original)
            logger.debug("roof drag %s aborted", self.roof_id)
        finally:
            self._teardown()


@contextmanager
def roof_drag(
    store: NodeStore,
    history: UndoHistory,
    roof_id: str,
    handle: HandleKind,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
    events: Optional[EventSource] = None,
) -> Iterator[RoofDragSession]:
    """Scoped roof drag: commits on normal exit, restores the start state on error."""
    session = RoofDragSession(store, history, roof_id, handle, config=config)
    if events is not None:
        session.attach(events)
    completed = False
    try:
        yield session
        completed = True
    finally:
        if not session.closed:
            if completed:
                session.finish()
            else:
                session.abort()
