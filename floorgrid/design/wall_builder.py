from __future__ import annotations

import logging
from typing import Callable, List, Optional

from floorgrid.core.config import DEFAULT_CONFIG, EngineConfig
from floorgrid.core.coordinates import GridPoint, points_equal
from floorgrid.design.snapping import snap_to_axis
from floorgrid.ops.events import GRID_CLICK, GRID_MOVE, EventSource, PointerEvent
from floorgrid.project.history import UndoHistory
from floorgrid.project.schema import WallSegment
from floorgrid.project.store import NodeStore, StoreSnapshot

logger = logging.getLogger(__name__)


class WallBuilder:
    """Two-click straight wall; holding shift snaps the end to an axis or diagonal."""

    def __init__(
        self,
        store: NodeStore,
        floor_id: Optional[str],
        *,
        history: Optional[UndoHistory] = None,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        self.store = store
        self.floor_id = floor_id
        self.history = history
        self.config = config
        self.start: Optional[GridPoint] = None
        self.preview_id: Optional[str] = None
        self._end: Optional[GridPoint] = None
        self._before: Optional[StoreSnapshot] = None
        self._unsubscribe: List[Callable[[], None]] = []

    def attach(self, events: EventSource) -> "WallBuilder":
        self._unsubscribe.append(events.on(GRID_CLICK, self._on_click))
        self._unsubscribe.append(events.on(GRID_MOVE, self._on_move))
        return self

    def _on_click(self, event: PointerEvent) -> None:
        self.click(event.position, shift=event.shift)

    def _on_move(self, event: PointerEvent) -> None:
        self.move(event.position, shift=event.shift)

    def detach(self) -> None:
        callbacks, self._unsubscribe = self._unsubscribe, []
        for off in callbacks:
            off()

    def click(self, position: GridPoint, *, shift: bool = False) -> Optional[str]:
        if self.start is None:
            p = (float(position[0]), float(position[1]))
            self._before = self.store.snapshot(label="wall")
            self.start = p
            self._end = p
            self._add_preview(p)
            return None

        end = self.move(position, shift=shift)
        if end is None or points_equal(end, self.start):
            logger.debug("wall click ignored: zero length")
            return None
        assert self.preview_id is not None
        wall_id = self.preview_id
        self.store.update(wall_id, preview=False, name="Wall")
        if self.history is not None and self._before is not None:
            self.history.push(self._before, label="wall")
        logger.info("wall %s committed %s -> %s", wall_id, self.start, end)
        self._reset()
        return wall_id

    def _add_preview(self, end: GridPoint) -> None:
        assert self.start is not None
        wall = WallSegment(
            id="",
            start=self.start,
            end=end,
            thickness=self.config.wall_thickness,
            height=self.config.wall_height,
            name="Wall Preview",
            preview=True,
        )
        self.preview_id = self.store.add(wall, self.floor_id)

    def move(self, position: GridPoint, *, shift: bool = False) -> Optional[GridPoint]:
        if self.start is None:
            return None
        p = (float(position[0]), float(position[1]))
        end = snap_to_axis(self.start, p) if shift else p
        if self.preview_id is None or self.store.find(self.preview_id) is None:
            # Removed outside the tool, e.g. by an undo.
            self._end = end
            self._add_preview(end)
            return end
        if self._end is None or not points_equal(end, self._end):
            self._end = end
            self.store.update(self.preview_id, end=end)
        return end

    def _reset(self) -> None:
        self.start = None
        self.preview_id = None
        self._end = None
        self._before = None

    def dispose(self) -> None:
        self.detach()
        if self.preview_id is not None and self.store.find(self.preview_id) is not None:
            self.store.delete(self.preview_id)
        self._reset()
