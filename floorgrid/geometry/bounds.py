from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np

from floorgrid.core.coordinates import GridPoint, direction, rotate90
from floorgrid.project.schema import RoofSegment, WallMountedElement, WallSegment


@dataclass(frozen=True)
class GridBounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def depth(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> GridPoint:
        return (0.5 * (self.min_x + self.max_x), 0.5 * (self.min_y + self.max_y))


def roof_footprint_grid(roof: RoofSegment, tile_size: float) -> List[GridPoint]:
    """Base corners of a roof in grid units; widths are metres so they are divided by the tile size."""
    perp = rotate90(direction(roof.start, roof.end))
    lw = roof.left_width / float(tile_size)
    rw = roof.right_width / float(tile_size)
    out: List[GridPoint] = []
    for p in (roof.start, roof.end):
        out.append((p[0] + perp[0] * lw, p[1] + perp[1] * lw))
        out.append((p[0] - perp[0] * rw, p[1] - perp[1] * rw))
    return out


def floor_bounds(
    walls: Iterable[WallSegment],
    roofs: Iterable[RoofSegment] = (),
    elements: Iterable[WallMountedElement] = (),
    *,
    tile_size: float,
    min_size: float = 6.0,
) -> Optional[GridBounds]:
    """Grid-unit bounding box of the visible content of one floor.

    Each axis is grown symmetrically to at least ``min_size``. Returns ``None``
    for an empty floor.
    """
    pts: List[GridPoint] = []
    for w in walls:
        if w.visible:
            pts.extend((w.start, w.end))
    for r in roofs:
        if not r.visible:
            continue
        pts.extend((r.start, r.end))
        if not r.is_degenerate:
            pts.extend(roof_footprint_grid(r, tile_size))
    for el in elements:
        # Mounted elements sit on their wall, which is already counted.
        if not el.is_mounted:
            pts.append(el.position)
    if not pts:
        return None

    arr = np.asarray(pts, dtype=float)
    lo = arr.min(axis=0)
    hi = arr.max(axis=0)
    span = hi - lo
    grow = np.maximum(float(min_size) - span, 0.0) * 0.5
    lo = lo - grow
    hi = hi + grow
    return GridBounds(min_x=float(lo[0]), max_x=float(hi[0]), min_y=float(lo[1]), max_y=float(hi[1]))
