from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from floorgrid.core.config import DEFAULT_CONFIG, EngineConfig
from floorgrid.core.coordinates import GridPoint, points_equal
from floorgrid.ops.events import GRID_CLICK, GRID_MOVE, EventSource
from floorgrid.project.history import UndoHistory
from floorgrid.project.schema import RoofSegment
from floorgrid.project.store import NodeStore, StoreSnapshot

logger = logging.getLogger(__name__)


def ridge_from_rectangle(
    a: GridPoint,
    b: GridPoint,
    *,
    tile_size: float = DEFAULT_CONFIG.tile_size,
    min_base: float = DEFAULT_CONFIG.roof_min_base,
) -> Optional[Tuple[GridPoint, GridPoint, float]]:
    """Ridge endpoints and per-side slope width (metres) for a dragged rectangle.

    The ridge runs along the longer side through the centre of the rectangle.
    Returns ``None`` when either side is shorter than ``min_base`` metres.
    """
    min_x, max_x = sorted((float(a[0]), float(b[0])))
    min_y, max_y = sorted((float(a[1]), float(b[1])))
    width, depth = max_x - min_x, max_y - min_y
    if width * tile_size < min_base or depth * tile_size < min_base:
        return None
    cx, cy = (min_x + max_x) / 2.0, (min_y + max_y) / 2.0
    if width >= depth:
        return (min_x, cy), (max_x, cy), depth / 2.0 * tile_size
    return (cx, min_y), (cx, max_y), width / 2.0 * tile_size


class RoofBuilder:
    """Two-click gable roof over a rectangle."""

    def __init__(
        self,
        store: NodeStore,
        floor_id: Optional[str],
        *,
        history: Optional[UndoHistory] = None,
        config: EngineConfig = DEFAULT_CONFIG,
        height: float = DEFAULT_CONFIG.wall_height,
    ) -> None:
        self.store = store
        self.floor_id = floor_id
        self.history = history
        self.config = config
        self.height = float(height)
        self.start: Optional[GridPoint] = None
        self.preview_id: Optional[str] = None
        self._last_end: Optional[GridPoint] = None
        self._before: Optional[StoreSnapshot] = None
        self._unsubscribe: List[Callable[[], None]] = []

    def attach(self, events: EventSource) -> "RoofBuilder":
        self._unsubscribe.append(events.on(GRID_CLICK, lambda e: self.click(e.position)))
        self._unsubscribe.append(events.on(GRID_MOVE, lambda e: self.move(e.position)))
        return self

    def detach(self) -> None:
        callbacks, self._unsubscribe = self._unsubscribe, []
        for off in callbacks:
            off()

    def click(self, position: GridPoint) -> Optional[str]:
        p = (float(position[0]), float(position[1]))
        if self.start is None:
            self._before = self.store.snapshot(label="roof")
            self.start = p
            self._last_end = None
            return None
        self.move(p)
        if self.preview_id is None:
            logger.debug("roof rectangle too small at %s; nothing created", p)
            self._reset()
            return None
        roof_id = self.preview_id
        self.store.update(roof_id, preview=False, name="Roof")
        if self.history is not None and self._before is not None:
            self.history.push(self._before, label="roof")
        logger.info("roof %s committed", roof_id)
        self._reset()
        return roof_id

    def move(self, position: GridPoint) -> None:
        if self.start is None:
            return
        end = (float(position[0]), float(position[1]))
        if self.preview_id is not None and self.store.find(self.preview_id) is None:
            # Removed outside the tool, e.g. by an undo.
            self.preview_id = None
            self._last_end = None
        if self._last_end is not None and points_equal(end, self._last_end):
            return
        self._last_end = end
        ridge = ridge_from_rectangle(
            self.start,
            end,
            tile_size=self.config.tile_size,
            min_base=self.config.roof_min_base,
        )
        if ridge is None:
            if self.preview_id is not None:
                self.store.delete(self.preview_id)
                self.preview_id = None
            return
        start, stop, width = ridge
        if self.preview_id is None:
            roof = RoofSegment(
                id="",
                start=start,
                end=stop,
                left_width=width,
                right_width=width,
                height=self.height,
                name="Roof Preview",
                preview=True,
            )
            self.preview_id = self.store.add(roof, self.floor_id)
        else:
            self.store.update(self.preview_id, start=start, end=stop, left_width=width, right_width=width)

    def _reset(self) -> None:
        self.start = None
        self.preview_id = None
        self._last_end = None
        self._before = None

    def dispose(self) -> None:
        self.detach()
        if self.preview_id is not None and self.store.find(self.preview_id) is not None:
            self.store.delete(self.preview_id)
        self._reset()
