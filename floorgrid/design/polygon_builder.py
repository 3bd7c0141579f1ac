from __future__ import annotations

import logging
from typing import Callable, List, Literal, Optional

from floorgrid.core.config import DEFAULT_CONFIG, EngineConfig
from floorgrid.core.coordinates import GridPoint, points_equal
from floorgrid.design.snapping import snap_to_axis
from floorgrid.ops.events import GRID_CLICK, GRID_DOUBLE_CLICK, GRID_MOVE, EventSource, PointerEvent
from floorgrid.project.history import UndoHistory
from floorgrid.project.schema import RoomGroup, WallSegment
from floorgrid.project.store import NodeStore, StoreSnapshot

logger = logging.getLogger(__name__)


BuilderState = Literal["empty", "drawing"]


def next_room_number(store: NodeStore, floor_id: Optional[str]) -> int:
    return sum(1 for n in store.children(floor_id, "room") if not n.preview) + 1


class PolygonBuilder:
    """Freehand room tool: clicks place snapped vertices joined by walls.

    The walls live under a preview room group until the loop is closed by
    clicking the first vertex again, or the polyline is finished open with a
    double click. ``dispose`` removes any unfinished preview.
    """

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
        self.points: List[GridPoint] = []
        self.placed_wall_ids: List[str] = []
        self.cursor_wall_id: Optional[str] = None
        self.group_id: Optional[str] = None
        self.closing = False
        self._last_cursor: Optional[GridPoint] = None
        self._before: Optional[StoreSnapshot] = None
        self._unsubscribe: List[Callable[[], None]] = []

    @property
    def state(self) -> BuilderState:
        return "drawing" if self.points else "empty"

    def attach(self, events: EventSource) -> "PolygonBuilder":
        self._unsubscribe.extend(
            [
                events.on(GRID_CLICK, lambda e: self.click(e.position)),
                events.on(GRID_MOVE, lambda e: self.move(e.position)),
                events.on(GRID_DOUBLE_CLICK, self._on_double_click),
            ]
        )
        return self

    def _on_double_click(self, event: PointerEvent) -> None:
        self.double_click()

    def detach(self) -> None:
        callbacks, self._unsubscribe = self._unsubscribe, []
        for off in callbacks:
            off()

    def _snap(self, position: GridPoint) -> GridPoint:
        p = (float(position[0]), float(position[1]))
        return snap_to_axis(self.points[-1], p) if self.points else p

    def _new_cursor_wall(self, at: GridPoint) -> str:
        wall = WallSegment(
            id="",
            start=at,
            end=at,
            thickness=self.config.wall_thickness,
            height=self.config.wall_height,
            name="Wall Preview Cursor",
            preview=True,
        )
        return self.store.add(wall, self.group_id)

    def _sync_preview(self) -> bool:
        """Check the gesture's preview geometry is still in the store.

        A missing cursor wall is recreated. A missing group or placed wall (for
        example after an undo) abandons the gesture; returns ``False`` then.
        """
        if not self.points:
            return False
        lost = self.group_id is None or self.store.find(self.group_id) is None
        lost = lost or any(self.store.find(w) is None for w in self.placed_wall_ids)
        if lost:
            logger.debug("polygon preview %s no longer in the store; gesture reset", self.group_id)
            if self.group_id is not None and self.store.find(self.group_id) is not None:
                self.store.delete(self.group_id)
            self._reset()
            return False
        if self.cursor_wall_id is None or self.store.find(self.cursor_wall_id) is None:
            self.cursor_wall_id = self._new_cursor_wall(self.points[-1])
            self._last_cursor = None
        return True

    def click(self, position: GridPoint) -> Optional[str]:
        """Place a vertex. Returns the room group id when the click closes the loop."""
        self._sync_preview()
        p = self._snap(position)
        if not self.points:
            self._before = self.store.snapshot(label="room")
            self.group_id = self.store.add(RoomGroup(id="", name="Custom Room Preview", points=[p], preview=True), self.floor_id)
            self.points = [p]
            self.cursor_wall_id = self._new_cursor_wall(p)
            self._last_cursor = None
            logger.debug("polygon started at %s", p)
            return None

        if points_equal(p, self.points[-1]):
            logger.debug("polygon click at %s ignored: no movement", p)
            return None
        if len(self.points) >= 3 and points_equal(p, self.points[0]):
            return self._finish(closed=True)

        assert self.cursor_wall_id is not None and self.group_id is not None
        self.store.update(
            self.cursor_wall_id,
            start=self.points[-1],
            end=p,
            name=f"Wall Preview {len(self.placed_wall_ids) + 1}",
        )
        self.placed_wall_ids.append(self.cursor_wall_id)
        self.points.append(p)
        self.store.update(self.group_id, points=list(self.points))
        self.cursor_wall_id = self._new_cursor_wall(p)
        self._last_cursor = None
        self.closing = False
        return None

    def move(self, position: GridPoint) -> Optional[GridPoint]:
        """Stretch the cursor wall to the snapped cursor; returns the snapped point."""
        if not self._sync_preview():
            return None
        p = self._snap(position)
        if self._last_cursor is not None and points_equal(p, self._last_cursor):
            return p
        self._last_cursor = p
        self.closing = len(self.points) >= 3 and points_equal(p, self.points[0])
        end = self.points[0] if self.closing else p
        self.store.update(self.cursor_wall_id, start=self.points[-1], end=end)
        return p

    def double_click(self) -> Optional[str]:
        """Finish as an open polyline; needs at least two vertices."""
        if len(self.points) < 2 or not self._sync_preview():
            return None
        return self._finish(closed=False)

    def _finish(self, *, closed: bool) -> str:
        assert self.group_id is not None and self.cursor_wall_id is not None
        number = next_room_number(self.store, self.floor_id)
        self.store.update(self.group_id, preview=False, name=f"Room {number}", points=list(self.points), closed=closed)
        for i, wall_id in enumerate(self.placed_wall_ids):
            self.store.update(wall_id, preview=False, name=f"Wall {i + 1}")
        if closed:
            self.store.update(
                self.cursor_wall_id,
                start=self.points[-1],
                end=self.points[0],
                preview=False,
                name=f"Wall {len(self.points)}",
            )
        else:
            self.store.delete(self.cursor_wall_id)
        if self.history is not None and self._before is not None:
            self.history.push(self._before, label="room")
        group_id = self.group_id
        logger.info(
            "room %s finished (%s, %d walls)",
            group_id,
            "closed" if closed else "open",
            len(self.placed_wall_ids) + (1 if closed else 0),
        )
        self._reset()
        return group_id

    def _reset(self) -> None:
        self.points = []
        self.placed_wall_ids = []
        self.cursor_wall_id = None
        self.group_id = None
        self.closing = False
        self._last_cursor = None
        self._before = None

    def dispose(self) -> None:
        """Abandon the gesture: stop listening and delete unfinished preview geometry."""
        self.detach()
        if self.group_id is not None and self.store.find(self.group_id) is not None:
            self.store.delete(self.group_id)
            logger.debug("polygon preview %s discarded", self.group_id)
        self._reset()
