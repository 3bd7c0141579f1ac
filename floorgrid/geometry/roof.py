from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from floorgrid.core.coordinates import WorldPoint, direction, rotate90, to_world
from floorgrid.geometry.mesh import TriMesh
from floorgrid.project.schema import RoofSegment


Point3 = Tuple[float, float, float]
Triangle = Tuple[Point3, Point3, Point3]

# Vertex order used by RoofGeometry.mesh().
_BL, _BR, _BLE, _BRE, _RS, _RE = range(6)

_FACES: Dict[str, List[Tuple[int, int, int]]] = {
    "front": [(_BL, _BR, _RS)],
    "back": [(_BLE, _RE, _BRE)],
    "left": [(_BL, _BLE, _RE), (_BL, _RE, _RS)],
    "right": [(_BR, _RS, _RE), (_BR, _RE, _BRE)],
}


@dataclass(frozen=True)
class RoofGeometry:
    """Six key points of a gable roof in world space (x, y up, z)."""

    bottom_left: Point3
    bottom_right: Point3
    bottom_left_end: Point3
    bottom_right_end: Point3
    ridge_start: Point3
    ridge_end: Point3

    def points(self) -> List[Point3]:
        return [
            self.bottom_left,
            self.bottom_right,
            self.bottom_left_end,
            self.bottom_right_end,
            self.ridge_start,
            self.ridge_end,
        ]

    def faces(self) -> Dict[str, List[Triangle]]:
        pts = self.points()
        return {name: [(pts[a], pts[b], pts[c]) for a, b, c in tris] for name, tris in _FACES.items()}

    def triangles(self) -> List[Triangle]:
        out: List[Triangle] = []
        for tris in self.faces().values():
            out.extend(tris)
        return out

    def mesh(self) -> TriMesh:
        faces = [f for tris in _FACES.values() for f in tris]
        mesh = TriMesh(vertices=self.points(), faces=faces)
        mesh.validate()
        return mesh

    def footprint(self) -> List[WorldPoint]:
        # Walks the base outline: left side forward, right side back.
        return [
            (self.bottom_left[0], self.bottom_left[2]),
            (self.bottom_left_end[0], self.bottom_left_end[2]),
            (self.bottom_right_end[0], self.bottom_right_end[2]),
            (self.bottom_right[0], self.bottom_right[2]),
        ]

    def centroid(self) -> WorldPoint:
        c = np.asarray(self.footprint(), dtype=float).mean(axis=0)
        return (float(c[0]), float(c[1]))


def roof_geometry(seg: RoofSegment, base_height: float = 0.0, *, tile_size: float) -> Optional[RoofGeometry]:
    """Gable roof solid for ``seg``; ``None`` for a degenerate ridge."""
    if seg.is_degenerate:
        return None
    s = to_world(seg.start, tile_size)
    e = to_world(seg.end, tile_size)
    px, pz = rotate90(direction(s, e))
    lw, rw = float(seg.left_width), float(seg.right_width)
    y0 = float(base_height)
    y1 = y0 + float(seg.height)
    return RoofGeometry(
        bottom_left=(s[0] + px * lw, y0, s[1] + pz * lw),
        bottom_right=(s[0] - px * rw, y0, s[1] - pz * rw),
        bottom_left_end=(e[0] + px * lw, y0, e[1] + pz * lw),
        bottom_right_end=(e[0] - px * rw, y0, e[1] - pz * rw),
        ridge_start=(s[0], y1, s[1]),
        ridge_end=(e[0], y1, e[1]),
    )


def roof_mesh(seg: RoofSegment, base_height: float = 0.0, *, tile_size: float) -> Optional[TriMesh]:
    geom = roof_geometry(seg, base_height, tile_size=tile_size)
    return None if geom is None else geom.mesh()
