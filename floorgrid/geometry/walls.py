from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from floorgrid.core.coordinates import GridPoint, add, angle_of, direction, distance, dot, points_equal, scale, sub, to_world
from floorgrid.geometry.mesh import TriMesh, box_mesh
from floorgrid.geometry.tolerance import EPS_SEGMENT
from floorgrid.project.schema import WallSegment


Point3 = Tuple[float, float, float]


def segment_length(seg: WallSegment) -> float:
    return distance(seg.start, seg.end)


def segment_angle(seg: WallSegment) -> float:
    return angle_of(seg.start, seg.end)


def is_measurable(seg: WallSegment) -> bool:
    return segment_length(seg) >= EPS_SEGMENT


def rendered_length(seg: WallSegment, tile_size: float) -> float:
    """World length of the wall box: base length extended by half the thickness at each end.

    The extension makes two walls meeting at a shared grid point close the corner at
    any angle between them.
    """
    return segment_length(seg) * float(tile_size) + float(seg.thickness)


@dataclass(frozen=True)
class WallBox:
    center: Tuple[float, float]  # world (x, z)
    rotation: float
    length: float
    height: float
    thickness: float


def wall_box(seg: WallSegment, tile_size: float) -> Optional[WallBox]:
    if not is_measurable(seg):
        return None
    mid = ((seg.start[0] + seg.end[0]) * 0.5, (seg.start[1] + seg.end[1]) * 0.5)
    return WallBox(
        center=to_world(mid, tile_size),
        rotation=segment_angle(seg),
        length=rendered_length(seg, tile_size),
        height=float(seg.height),
        thickness=float(seg.thickness),
    )


def wall_mesh(seg: WallSegment, tile_size: float, base_height: float = 0.0) -> Optional[TriMesh]:
    box = wall_box(seg, tile_size)
    if box is None:
        return None
    return box_mesh(box.center, box.length, box.thickness, box.height, box.rotation, y0=base_height)


def wall_local_to_grid(seg: WallSegment, offset: float) -> GridPoint:
    return add(seg.start, scale(direction(seg.start, seg.end), float(offset)))


def grid_to_wall_local(seg: WallSegment, point: GridPoint) -> float:
    # Signed distance along the wall from its start; negative before the start.
    return dot(sub(point, seg.start), direction(seg.start, seg.end))


def wall_local_to_world(seg: WallSegment, offset: float, elevation: float = 0.0, *, tile_size: float) -> Point3:
    x, z = to_world(wall_local_to_grid(seg, offset), tile_size)
    return (x, float(elevation), z)


def shared_endpoints(a: WallSegment, b: WallSegment) -> List[GridPoint]:
    out: List[GridPoint] = []
    for p in (a.start, a.end):
        if (points_equal(p, b.start) or points_equal(p, b.end)) and not any(points_equal(p, q) for q in out):
            out.append(p)
    return out


class WallNetwork:
    """Ordered wall collection for one floor."""

    def __init__(self, walls: Iterable[WallSegment] = ()) -> None:
        self._walls: Dict[str, WallSegment] = {}
        for w in walls:
            self.add(w)

    def __len__(self) -> int:
        return len(self._walls)

    def __iter__(self):
        return iter(list(self._walls.values()))

    def __contains__(self, wall_id: object) -> bool:
        return wall_id in self._walls

    def get(self, wall_id: str) -> Optional[WallSegment]:
        return self._walls.get(wall_id)

    def add(self, wall: WallSegment) -> None:
        if wall.id in self._walls:
            raise ValueError(f"Wall already exists: {wall.id}")
        self._walls[wall.id] = wall

    def replace(self, wall: WallSegment) -> None:
        if wall.id not in self._walls:
            raise KeyError(wall.id)
        self._walls[wall.id] = wall

    def remove(self, wall_id: str) -> Optional[WallSegment]:
        return self._walls.pop(wall_id, None)

    def walls(self) -> List[WallSegment]:
        return list(self._walls.values())

    def renderable(self) -> List[WallSegment]:
        return [w for w in self._walls.values() if w.visible and is_measurable(w)]

    def degenerate(self) -> List[WallSegment]:
        return [w for w in self._walls.values() if not is_measurable(w)]

    def walls_at(self, point: GridPoint) -> List[WallSegment]:
        return [w for w in self._walls.values() if points_equal(w.start, point) or points_equal(w.end, point)]

    def boxes(self, tile_size: float) -> Dict[str, WallBox]:
        out: Dict[str, WallBox] = {}
        for w in self.renderable():
            box = wall_box(w, tile_size)
            if box is not None:
                out[w.id] = box
        return out


def walls_from_points(points: Sequence[GridPoint], *, closed: bool, id_prefix: str = "wall", **wall_kwargs) -> List[WallSegment]:
    """Build consecutive wall segments through ``points``; skips zero-length steps."""
    pts = list(points)
    pairs = list(zip(pts, pts[1:]))
    if closed and len(pts) >= 3:
        pairs.append((pts[-1], pts[0]))
    out: List[WallSegment] = []
    for a, b in pairs:
        if points_equal(a, b):
            continue
        out.append(WallSegment(id=f"{id_prefix}_{len(out) + 1}", start=a, end=b, **wall_kwargs))
    return out
