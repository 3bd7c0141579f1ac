from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from floorgrid.core.config import DEFAULT_CONFIG, EngineConfig
from floorgrid.geometry.tolerance import EPS_POS, EPS_SNAP


GridPoint = Tuple[float, float]
WorldPoint = Tuple[float, float]  # (x, z) on the horizontal plane


def to_world(point: GridPoint, tile_size: float) -> WorldPoint:
    return (float(point[0]) * float(tile_size), float(point[1]) * float(tile_size))


def to_world_array(points: Sequence[GridPoint], tile_size: float) -> np.ndarray:
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    return pts * float(tile_size)


def to_grid(world: WorldPoint, tile_size: float, divisions: Optional[int] = None) -> Optional[GridPoint]:
    """Round a world point to the nearest grid intersection.

    Returns ``None`` when ``divisions`` is given and the intersection falls
    outside ``0..divisions`` on either axis.
    """
    if tile_size <= 0.0:
        raise ValueError("tile_size must be > 0")
    # Halves round up.
    gx = float(math.floor(float(world[0]) / float(tile_size) + 0.5))
    gy = float(math.floor(float(world[1]) / float(tile_size) + 0.5))
    if divisions is not None and not (0 <= gx <= divisions and 0 <= gy <= divisions):
        return None
    return (gx, gy)


def add(a: GridPoint, b: GridPoint) -> GridPoint:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: GridPoint, b: GridPoint) -> GridPoint:
    return (a[0] - b[0], a[1] - b[1])


def scale(v: GridPoint, s: float) -> GridPoint:
    return (v[0] * s, v[1] * s)


def dot(a: GridPoint, b: GridPoint) -> float:
    return a[0] * b[0] + a[1] * b[1]


def distance(a: GridPoint, b: GridPoint) -> float:
    return math.hypot(float(b[0]) - float(a[0]), float(b[1]) - float(a[1]))


def direction(a: GridPoint, b: GridPoint) -> GridPoint:
    dx, dy = float(b[0]) - float(a[0]), float(b[1]) - float(a[1])
    ln = math.hypot(dx, dy)
    if ln <= EPS_POS:
        return (0.0, 0.0)
    return (dx / ln, dy / ln)


def rotate90(v: GridPoint) -> GridPoint:
    # Left-hand perpendicular on the (x, z) plane.
    return (-v[1], v[0])


def points_equal(a: GridPoint, b: GridPoint, eps: float = EPS_SNAP) -> bool:
    return abs(a[0] - b[0]) <= eps and abs(a[1] - b[1]) <= eps


def lerp(a: GridPoint, b: GridPoint, t: float) -> GridPoint:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def angle_of(a: GridPoint, b: GridPoint) -> float:
    # Negated dz so the angle matches a rotation about the vertical axis in a y-up scene.
    return math.atan2(-(float(b[1]) - float(a[1])), float(b[0]) - float(a[0]))


@dataclass(frozen=True)
class GridSpec:
    tile_size: float = DEFAULT_CONFIG.tile_size
    grid_size: float = DEFAULT_CONFIG.grid_size
    # World position of grid intersection (0, 0); the grid is centred on the world origin.
    offset: WorldPoint = (-DEFAULT_CONFIG.grid_size / 2.0, -DEFAULT_CONFIG.grid_size / 2.0)

    @classmethod
    def from_config(cls, config: EngineConfig) -> "GridSpec":
        half = config.grid_size / 2.0
        return cls(tile_size=config.tile_size, grid_size=config.grid_size, offset=(-half, -half))

    @property
    def divisions(self) -> int:
        return int(math.floor(self.grid_size / self.tile_size))

    def contains(self, point: GridPoint) -> bool:
        return 0.0 <= point[0] <= self.divisions and 0.0 <= point[1] <= self.divisions

    def grid_to_world(self, point: GridPoint) -> WorldPoint:
        x, z = to_world(point, self.tile_size)
        return (x + self.offset[0], z + self.offset[1])

    def world_to_grid(self, world: WorldPoint) -> Optional[GridPoint]:
        local = (float(world[0]) - self.offset[0], float(world[1]) - self.offset[1])
        return to_grid(local, self.tile_size, self.divisions)
