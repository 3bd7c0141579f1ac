from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, Dict, List, Literal, Optional, Tuple, Union

from floorgrid.core.config import DEFAULT_CONFIG
from floorgrid.core.coordinates import angle_of, direction, distance
from floorgrid.geometry.tolerance import EPS_SEGMENT


GridPoint = Tuple[float, float]
ElementType = Literal["door", "window"]


class InvalidRecordError(ValueError):
    pass


def _point(p: Any) -> GridPoint:
    return (float(p[0]), float(p[1]))


@dataclass
class WallSegment:
    id: str
    start: GridPoint
    end: GridPoint
    thickness: float = DEFAULT_CONFIG.wall_thickness
    height: float = DEFAULT_CONFIG.wall_height
    visible: bool = True
    opacity: int = 100
    name: str = ""
    preview: bool = False

    node_type: ClassVar[str] = "wall"

    def __post_init__(self) -> None:
        self.start = _point(self.start)
        self.end = _point(self.end)
        if self.thickness <= 0.0:
            raise InvalidRecordError(f"Wall {self.id}: thickness must be > 0")
        if self.height <= 0.0:
            raise InvalidRecordError(f"Wall {self.id}: height must be > 0")
        if not 0 <= int(self.opacity) <= 100:
            raise InvalidRecordError(f"Wall {self.id}: opacity must be within 0..100")

    @property
    def length(self) -> float:
        return distance(self.start, self.end)

    @property
    def direction(self) -> GridPoint:
        return direction(self.start, self.end)

    @property
    def rotation(self) -> float:
        return angle_of(self.start, self.end)

    @property
    def is_degenerate(self) -> bool:
        # Zero-length cursor walls are kept as data but never rendered or measured.
        return self.length < EPS_SEGMENT

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.node_type, **asdict(self)}


@dataclass
class RoofSegment:
    """Gable roof described by its ridge line (grid units) and two slope widths (metres)."""

    id: str
    start: GridPoint
    end: GridPoint
    left_width: float = DEFAULT_CONFIG.roof_left_width
    right_width: float = DEFAULT_CONFIG.roof_right_width
    height: float = DEFAULT_CONFIG.roof_height
    visible: bool = True
    name: str = ""
    preview: bool = False

    node_type: ClassVar[str] = "roof"

    def __post_init__(self) -> None:
        self.start = _point(self.start)
        self.end = _point(self.end)
        if self.left_width <= 0.0 or self.right_width <= 0.0:
            raise InvalidRecordError(f"Roof {self.id}: slope widths must be > 0")
        if self.height <= 0.0:
            raise InvalidRecordError(f"Roof {self.id}: height must be > 0")

    @property
    def ridge_length(self) -> float:
        return distance(self.start, self.end)

    @property
    def is_degenerate(self) -> bool:
        return self.ridge_length < EPS_SEGMENT

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.node_type, **asdict(self)}


@dataclass
class WallMountedElement:
    """Door or window.

    When ``parent_wall_id`` is set, ``position[0]`` is the distance along the
    parent wall from its start (wall-local) and ``position[1]`` is unused.
    Otherwise ``position`` is a floor grid point.
    """

    id: str
    element_type: ElementType = "door"
    parent_wall_id: Optional[str] = None
    position: GridPoint = (0.0, 0.0)
    rotation: float = 0.0
    width_cells: int = DEFAULT_CONFIG.element_width_cells
    can_place: bool = False
    name: str = ""
    preview: bool = False

    def __post_init__(self) -> None:
        self.position = _point(self.position)
        if self.element_type not in ("door", "window"):
            raise InvalidRecordError(f"Element {self.id}: unsupported type {self.element_type!r}")
        if self.width_cells <= 0:
            raise InvalidRecordError(f"Element {self.id}: width_cells must be > 0")

    @property
    def node_type(self) -> str:
        return self.element_type

    @property
    def is_mounted(self) -> bool:
        return self.parent_wall_id is not None

    @property
    def local_offset(self) -> float:
        return self.position[0]

    def span(self) -> Tuple[float, float]:
        half = self.width_cells / 2.0
        return (self.local_offset - half, self.local_offset + half)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.node_type, **asdict(self)}


@dataclass
class RoomGroup:
    id: str
    name: str = ""
    points: List[GridPoint] = field(default_factory=list)
    closed: bool = False
    preview: bool = False

    node_type: ClassVar[str] = "room"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.node_type, **asdict(self)}


@dataclass
class Floor:
    id: str
    name: str = ""
    elevation: float = 0.0

    node_type: ClassVar[str] = "floor"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.node_type, **asdict(self)}


Node = Union[Floor, RoomGroup, WallSegment, RoofSegment, WallMountedElement]


def record_from_dict(data: Dict[str, Any]) -> Node:
    payload = dict(data)
    kind = str(payload.pop("type", ""))
    if kind == "wall":
        return WallSegment(**payload)
    if kind == "roof":
        return RoofSegment(**payload)
    if kind in ("door", "window"):
        payload.setdefault("element_type", kind)
        return WallMountedElement(**payload)
    if kind == "room":
        payload["points"] = [_point(p) for p in payload.get("points", [])]
        return RoomGroup(**payload)
    if kind == "floor":
        return Floor(**payload)
    raise InvalidRecordError(f"Unsupported node type: {kind!r}")
