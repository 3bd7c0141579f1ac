from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Literal, Optional

from floorgrid.core.config import DEFAULT_CONFIG, EngineConfig
from floorgrid.core.coordinates import GridPoint, points_equal
from floorgrid.geometry.openings import PlacementResult, validate_placement
from floorgrid.geometry.walls import grid_to_wall_local
from floorgrid.ops.events import GRID_CLICK, GRID_LEAVE, GRID_MOVE, EventSource
from floorgrid.project.history import UndoHistory
from floorgrid.project.schema import ElementType, WallMountedElement, WallSegment
from floorgrid.project.store import NodeStore

logger = logging.getLogger(__name__)


ToolState = Literal["idle", "previewing", "committing"]
ELEMENT_TYPES = ("door", "window")


class ElementTool:
    """Door/window placement tool.

    ``Idle`` until the cursor moves over the floor, then ``Previewing`` with
    exactly one preview element in the store that follows the validator
    result. A click commits only when the placement is valid.
    """

    def __init__(
        self,
        store: NodeStore,
        floor_id: str,
        element_type: ElementType = "door",
        *,
        history: Optional[UndoHistory] = None,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        if element_type not in ELEMENT_TYPES:
            raise ValueError(f"Unsupported element type: {element_type!r}")
        self.store = store
        self.floor_id = floor_id
        self.element_type = element_type
        self.history = history
        self.config = config
        self.state: ToolState = "idle"
        self.preview_id: Optional[str] = None
        self.result: Optional[PlacementResult] = None
        self._last_position: Optional[GridPoint] = None
        self._last_rotation = 0.0
        self._unsubscribe: List[Callable[[], None]] = []

    @property
    def label(self) -> str:
        return self.element_type.capitalize()

    def attach(self, events: EventSource) -> "ElementTool":
        self._unsubscribe.append(events.on(GRID_MOVE, lambda e: self.move(e.position)))
        self._unsubscribe.append(events.on(GRID_CLICK, lambda e: self.click(e.position)))
        self._unsubscribe.append(events.on(GRID_LEAVE, lambda e: self.leave()))
        return self

    def detach(self) -> None:
        callbacks, self._unsubscribe = self._unsubscribe, []
        for off in callbacks:
            off()

    def walls(self) -> List[WallSegment]:
        return [w for w in self.store.descendants(self.floor_id, "wall") if not w.preview]

    def elements(self) -> List[WallMountedElement]:
        out: List[WallMountedElement] = []
        for kind in ELEMENT_TYPES:
            out.extend(e for e in self.store.descendants(self.floor_id, kind) if not e.preview)
        return out

    def evaluate(self, position: GridPoint, *, ignore_id: Optional[str] = None) -> PlacementResult:
        return validate_placement(
            position,
            self.walls(),
            self.elements(),
            width_cells=self.config.element_width_cells,
            max_snap_distance=self.config.max_snap_distance,
            last_rotation=self._last_rotation,
            ignore_id=ignore_id,
        )

    def _record_fields(self, result: PlacementResult) -> Dict[str, Any]:
        wall = result.nearest_wall
        if wall is None:
            return {
                "parent_wall_id": None,
                "position": result.centered_position,
                "rotation": result.rotation,
                "can_place": False,
            }
        offset = result.local_offset
        if offset is None:
            offset = grid_to_wall_local(wall, result.grid_position)
        return {
            "parent_wall_id": wall.id,
            "position": (offset, 0.0),
            "rotation": result.rotation,
            "can_place": result.can_place,
        }

    def _preview_alive(self) -> bool:
        return self.preview_id is not None and self.store.find(self.preview_id) is not None

    def move(self, position: GridPoint) -> PlacementResult:
        p = (float(position[0]), float(position[1]))
        if (
            self.result is not None
            and self._last_position is not None
            and points_equal(p, self._last_position)
            and self._preview_alive()
        ):
            return self.result
        return self._refresh(p)

    def _refresh(self, p: GridPoint) -> PlacementResult:
        self._last_position = p
        result = self.evaluate(p)
        self._last_rotation = result.rotation
        self._show_preview(result)
        self.result = result
        self.state = "previewing"
        logger.debug(
            "%s preview at %s wall=%s can_place=%s",
            self.element_type,
            p,
            None if result.nearest_wall is None else result.nearest_wall.id,
            result.can_place,
        )
        return result

    def _show_preview(self, result: PlacementResult) -> None:
        fields = self._record_fields(result)
        parent = fields["parent_wall_id"] or self.floor_id
        if not self._preview_alive():
            element = WallMountedElement(
                id="",
                element_type=self.element_type,
                width_cells=self.config.element_width_cells,
                name=f"{self.label} Preview",
                preview=True,
                **fields,
            )
            self.preview_id = self.store.add(element, parent)
            return
        if self.store.parent_of(self.preview_id) != parent:
            self.store.move(self.preview_id, parent)
        self.store.update(self.preview_id, **fields)

    def click(self, position: Optional[GridPoint] = None) -> Optional[str]:
        """Commit at ``position`` (or the last hovered point). Returns the new element id, or ``None`` when rejected.

        The placement is validated again against the current store, so walls
        and elements changed since the last move are taken into account.
        """
        p = self._last_position if position is None else (float(position[0]), float(position[1]))
        if p is None:
            return None
        result = self._refresh(p)
        if not result.can_place:
            logger.debug("%s placement rejected at %s", self.element_type, p)
            return None

        self.state = "committing"
        fields = self._record_fields(result)
        if self._preview_alive():
            self.store.delete(self.preview_id)
        self.preview_id = None
        before = self.store.snapshot(label=self.element_type)
        number = sum(1 for e in self.elements() if e.element_type == self.element_type) + 1
        element = WallMountedElement(
            id="",
            element_type=self.element_type,
            width_cells=self.config.element_width_cells,
            name=f"{self.label} {number}",
            **fields,
        )
        element_id = self.store.add(element, fields["parent_wall_id"])
        if self.history is not None:
            self.history.push(before, label=self.element_type)
        logger.info("%s %s committed on wall %s", self.element_type, element_id, fields["parent_wall_id"])
        self.result = None
        self._last_position = None
        self.state = "idle"
        return element_id

    def relocate(self, element_id: str, position: GridPoint) -> PlacementResult:
        """Move an existing element; it is ignored in its own collision check."""
        element = self.store.get(element_id)
        if not isinstance(element, WallMountedElement):
            raise TypeError(f"Node {element_id} is not a door or window")
        result = self.evaluate(position, ignore_id=element_id)
        if not result.can_place:
            logger.debug("%s %s move rejected at %s", element.element_type, element_id, position)
            return result
        fields = self._record_fields(result)
        if all(getattr(element, k) == v for k, v in fields.items()):
            return result
        before = self.store.snapshot(label=f"move {element.element_type}")
        if self.store.parent_of(element_id) != fields["parent_wall_id"]:
            self.store.move(element_id, fields["parent_wall_id"])
        self.store.update(element_id, **fields)
        if self.history is not None:
            self.history.push(before, label=f"move {element.element_type}")
        return result

    def leave(self) -> None:
        if self.preview_id is not None and self.store.find(self.preview_id) is not None:
            self.store.delete(self.preview_id)
        self.preview_id = None
        self.result = None
        self._last_position = None
        self.state = "idle"

    def dispose(self) -> None:
        self.detach()
        self.leave()
