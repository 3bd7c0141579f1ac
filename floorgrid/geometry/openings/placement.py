from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from floorgrid.core.config import DEFAULT_CONFIG
from floorgrid.core.coordinates import GridPoint, distance, sub
from floorgrid.geometry.tolerance import EPS_OVERLAP
from floorgrid.geometry.walls import is_measurable, segment_angle, segment_length, wall_local_to_grid
from floorgrid.project.schema import WallMountedElement, WallSegment


Span = Tuple[float, float]


@dataclass(frozen=True)
class WallProjection:
    wall: WallSegment
    t: float  # clamped to [0, 1]
    offset: float  # wall-local distance from the start, t * length
    distance: float


@dataclass(frozen=True)
class PlacementResult:
    grid_position: GridPoint
    centered_position: GridPoint
    rotation: float
    can_place: bool
    nearest_wall: Optional[WallSegment]
    # Clamped wall-local centre of the element; None when free-floating or the element cannot fit.
    local_offset: Optional[float] = None


def project_to_wall(point: GridPoint, wall: WallSegment) -> Optional[WallProjection]:
    if not is_measurable(wall):
        return None
    length = segment_length(wall)
    dx, dy = sub(wall.end, wall.start)
    px, py = sub(point, wall.start)
    t = (px * dx + py * dy) / (length * length)
    t = max(0.0, min(1.0, t))
    offset = t * length
    foot = wall_local_to_grid(wall, offset)
    return WallProjection(wall=wall, t=t, offset=offset, distance=distance(point, foot))


def nearest_wall(point: GridPoint, walls: Iterable[WallSegment], max_distance: float) -> Optional[WallProjection]:
    """Closest visible, measurable wall within ``max_distance``; the first wall wins ties."""
    best: Optional[WallProjection] = None
    for wall in walls:
        if not wall.visible:
            continue
        proj = project_to_wall(point, wall)
        if proj is None or proj.distance > max_distance:
            continue
        if best is None or proj.distance < best.distance:
            best = proj
    return best


def clamp_center(offset: float, wall_length: float, width: float) -> Optional[float]:
    half = 0.5 * float(width)
    if wall_length + EPS_OVERLAP < float(width):
        return None
    return min(max(float(offset), half), float(wall_length) - half)


def element_span(center: float, width: float) -> Span:
    half = 0.5 * float(width)
    return (float(center) - half, float(center) + half)


def spans_overlap(a: Span, b: Span) -> bool:
    # Spans that only touch at an edge do not collide.
    return a[0] < b[1] - EPS_OVERLAP and a[1] > b[0] + EPS_OVERLAP


def overlaps_existing(
    wall_id: str,
    span: Span,
    elements: Iterable[WallMountedElement],
    *,
    ignore_id: Optional[str] = None,
) -> bool:
    for el in elements:
        if el.parent_wall_id != wall_id or el.preview or el.id == ignore_id:
            continue
        if spans_overlap(span, el.span()):
            return True
    return False


def validate_placement(
    cursor: GridPoint,
    walls: Sequence[WallSegment],
    elements: Sequence[WallMountedElement] = (),
    *,
    width_cells: float = DEFAULT_CONFIG.element_width_cells,
    max_snap_distance: float = DEFAULT_CONFIG.max_snap_distance,
    last_rotation: float = 0.0,
    ignore_id: Optional[str] = None,
) -> PlacementResult:
    """Resolve a cursor grid position into a wall mount decision.

    Pure: no argument is mutated, so it can run on every pointer move.
    """
    cursor = (float(cursor[0]), float(cursor[1]))
    proj = nearest_wall(cursor, walls, max_snap_distance)
    if proj is None:
        return PlacementResult(
            grid_position=cursor,
            centered_position=cursor,
            rotation=float(last_rotation),
            can_place=False,
            nearest_wall=None,
        )

    wall = proj.wall
    rotation = segment_angle(wall)
    grid_position = wall_local_to_grid(wall, proj.offset)
    center = clamp_center(proj.offset, segment_length(wall), width_cells)
    if center is None:
        return PlacementResult(
            grid_position=grid_position,
            centered_position=grid_position,
            rotation=rotation,
            can_place=False,
            nearest_wall=wall,
        )

    blocked = overlaps_existing(wall.id, element_span(center, width_cells), elements, ignore_id=ignore_id)
    return PlacementResult(
        grid_position=grid_position,
        centered_position=wall_local_to_grid(wall, center),
        rotation=rotation,
        can_place=not blocked,
        nearest_wall=wall,
        local_offset=center,
    )
