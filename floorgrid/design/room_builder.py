from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from floorgrid.core.config import DEFAULT_CONFIG, EngineConfig
from floorgrid.core.coordinates import GridPoint, points_equal
from floorgrid.design.polygon_builder import next_room_number
from floorgrid.geometry.tolerance import EPS_SNAP
from floorgrid.ops.events import GRID_CLICK, GRID_MOVE, EventSource
from floorgrid.project.history import UndoHistory
from floorgrid.project.schema import RoomGroup, WallSegment
from floorgrid.project.store import NodeStore, StoreSnapshot

logger = logging.getLogger(__name__)


SIDES = ("Top", "Bottom", "Left", "Right")


def rectangle_sides(a: GridPoint, b: GridPoint) -> Dict[str, Tuple[GridPoint, GridPoint]]:
    (x1, y1), (x2, y2) = a, b
    return {
        "Top": ((x1, y2), (x2, y2)),
        "Bottom": ((x1, y1), (x2, y1)),
        "Left": ((x1, y1), (x1, y2)),
        "Right": ((x2, y1), (x2, y2)),
    }


class RectRoomBuilder:
    """Two-click rectangular room: first click anchors a corner, second click commits."""

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
        self.group_id: Optional[str] = None
        self.wall_ids: Dict[str, str] = {}
        self._last_end: Optional[GridPoint] = None
        self._before: Optional[StoreSnapshot] = None
        self._unsubscribe: List[Callable[[], None]] = []

    def attach(self, events: EventSource) -> "RectRoomBuilder":
        self._unsubscribe.append(events.on(GRID_CLICK, lambda e: self.click(e.position)))
        self._unsubscribe.append(events.on(GRID_MOVE, lambda e: self.move(e.position)))
        return self

    def detach(self) -> None:
        callbacks, self._unsubscribe = self._unsubscribe, []
        for off in callbacks:
            off()

    def _sync_preview(self) -> bool:
        # An undo can remove the preview under us; start over in that case.
        if self.start is None:
            return False
        ids = [self.group_id, *self.wall_ids.values()]
        if all(i is not None and self.store.find(i) is not None for i in ids):
            return True
        logger.debug("rectangle room preview %s no longer in the store; gesture reset", self.group_id)
        if self.group_id is not None and self.store.find(self.group_id) is not None:
            self.store.delete(self.group_id)
        self._reset()
        return False

    def click(self, position: GridPoint) -> Optional[str]:
        p = (float(position[0]), float(position[1]))
        if not self._sync_preview():
            self._begin(p)
            return None
        self.move(p)
        if self._last_end is None or self._degenerate(self._last_end):
            logger.debug("rectangle room click at %s ignored: zero area", p)
            return None
        return self._commit()

    def _degenerate(self, end: GridPoint) -> bool:
        assert self.start is not None
        return abs(end[0] - self.start[0]) <= EPS_SNAP or abs(end[1] - self.start[1]) <= EPS_SNAP

    def _begin(self, p: GridPoint) -> None:
        self._before = self.store.snapshot(label="room")
        self.start = p
        self._last_end = None
        number = next_room_number(self.store, self.floor_id)
        self.group_id = self.store.add(RoomGroup(id="", name=f"Room {number} Preview", preview=True), self.floor_id)
        for side in SIDES:
            wall = WallSegment(
                id="",
                start=p,
                end=p,
                thickness=self.config.wall_thickness,
                height=self.config.wall_height,
                name=f"Wall {side} Preview",
                preview=True,
            )
            self.wall_ids[side] = self.store.add(wall, self.group_id)

    def move(self, position: GridPoint) -> None:
        if not self._sync_preview():
            return
        end = (float(position[0]), float(position[1]))
        if self._last_end is not None and points_equal(end, self._last_end):
            return
        self._last_end = end
        for side, (a, b) in rectangle_sides(self.start, end).items():
            self.store.update(self.wall_ids[side], start=a, end=b)
        (x1, y1), (x2, y2) = self.start, end
        self.store.update(self.group_id, points=[(x1, y1), (x2, y1), (x2, y2), (x1, y2)], closed=True)

    def _commit(self) -> str:
        assert self.group_id is not None
        group = self.store.get(self.group_id)
        self.store.update(self.group_id, preview=False, name=group.name.replace(" Preview", ""))
        for side, wall_id in self.wall_ids.items():
            self.store.update(wall_id, preview=False, name=f"Wall {side}")
        if self.history is not None and self._before is not None:
            self.history.push(self._before, label="room")
        group_id = self.group_id
        logger.info("rectangle room %s committed", group_id)
        self._reset()
        return group_id

    def _reset(self) -> None:
        self.start = None
        self.group_id = None
        self.wall_ids = {}
        self._last_end = None
        self._before = None

    def dispose(self) -> None:
        self.detach()
        if self.group_id is not None and self.store.find(self.group_id) is not None:
            self.store.delete(self.group_id)
        self._reset()
