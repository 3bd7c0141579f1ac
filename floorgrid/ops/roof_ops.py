from __future__ import annotations

import math
from dataclasses import replace
from typing import Literal, Optional, Tuple

from floorgrid.core.config import DEFAULT_CONFIG, EngineConfig
from floorgrid.core.coordinates import GridPoint, WorldPoint, dot, rotate90, to_world
from floorgrid.geometry.roof import roof_geometry
from floorgrid.geometry.tolerance import EPS_SEGMENT
from floorgrid.project.schema import RoofSegment


Edge = Literal["front", "back", "left", "right"]
TranslateAxis = Literal["ridge", "perp", "free"]


def snap_value(value: float, step: float) -> float:
    # Half-up rounding so 0.5 steps never collapse toward zero.
    return math.floor(float(value) / float(step) + 0.5) * float(step)


def snap_step(base: float, *, shift: bool, alt: bool, config: EngineConfig = DEFAULT_CONFIG) -> Optional[float]:
    """Active snap increment for a modifier state; ``None`` when snapping is off."""
    if not shift:
        return None
    return float(base) / config.fine_step_divisor if alt else float(base)


def wrap_angle(angle: float) -> float:
    return (float(angle) + math.pi) % (2.0 * math.pi) - math.pi


def ridge_axes(seg: RoofSegment, tile_size: float) -> Optional[Tuple[WorldPoint, WorldPoint]]:
    """World unit vectors along and across the ridge; ``None`` for a ridge too short to orient."""
    sx, sz = to_world(seg.start, tile_size)
    ex, ez = to_world(seg.end, tile_size)
    dx, dz = ex - sx, ez - sz
    length = math.hypot(dx, dz)
    if length < EPS_SEGMENT:
        return None
    ridge = (dx / length, dz / length)
    return ridge, rotate90(ridge)


def _offset(p: GridPoint, v: WorldPoint, amount: float, tile_size: float) -> GridPoint:
    return (p[0] + v[0] * amount / tile_size, p[1] + v[1] * amount / tile_size)


def _snap_point(p: GridPoint, step: Optional[float]) -> GridPoint:
    if step is None:
        return p
    return (snap_value(p[0], step), snap_value(p[1], step))


def drag_edge(
    seg: RoofSegment,
    edge: Edge,
    delta: WorldPoint,
    *,
    tile_size: float = DEFAULT_CONFIG.tile_size,
    min_width: float = DEFAULT_CONFIG.roof_min_width,
    step: Optional[float] = None,
) -> RoofSegment:
    """Apply a ground-plane edge drag ``delta`` (metres) to ``seg``.

    Front/back move one ridge endpoint along the ridge. Left/right change the
    dragged width and shift the ridge by half the change, reflecting the same
    half into the opposite width. ``step`` rounds coordinates and widths.
    """
    axes = ridge_axes(seg, tile_size)
    if axes is None:
        return seg
    ridge, perp = axes
    cur_l, cur_r = float(seg.left_width), float(seg.right_width)

    if edge in ("front", "back"):
        along = dot(delta, ridge)
        if edge == "front":
            return replace(seg, start=_snap_point(_offset(seg.start, ridge, along, tile_size), step))
        return replace(seg, end=_snap_point(_offset(seg.end, ridge, along, tile_size), step))

    if edge == "left":
        # Lower bound keeps the opposite width at or above min_width after the shift.
        lower = max(min_width, cur_l - 2.0 * (cur_r - min_width))
        new_l = max(lower, cur_l + dot(delta, perp))
        shift = (new_l - cur_l) / 2.0
        left, right = new_l - shift, cur_r + shift
    elif edge == "right":
        lower = max(min_width, cur_r - 2.0 * (cur_l - min_width))
        new_r = max(lower, cur_r - dot(delta, perp))
        shift = -(new_r - cur_r) / 2.0
        left, right = cur_l - shift, new_r + shift
    else:
        raise ValueError(f"Unsupported roof edge: {edge!r}")

    if step is not None:
        left = max(min_width, snap_value(left, step))
        right = max(min_width, snap_value(right, step))
    return replace(
        seg,
        start=_snap_point(_offset(seg.start, perp, shift, tile_size), step),
        end=_snap_point(_offset(seg.end, perp, shift, tile_size), step),
        left_width=left,
        right_width=right,
    )


def drag_height(
    seg: RoofSegment,
    dy: float,
    *,
    min_height: float = DEFAULT_CONFIG.roof_min_height,
    max_height: float = DEFAULT_CONFIG.roof_max_height,
    step: Optional[float] = None,
) -> RoofSegment:
    height = min(max_height, max(min_height, float(seg.height) + float(dy)))
    if step is not None:
        height = min(max_height, max(min_height, snap_value(height, step)))
    return replace(seg, height=height)


def base_centroid(seg: RoofSegment, tile_size: float) -> Optional[WorldPoint]:
    geom = roof_geometry(seg, tile_size=tile_size)
    return None if geom is None else geom.centroid()


def rotate_roof(seg: RoofSegment, angle: float, pivot: WorldPoint, *, tile_size: float) -> RoofSegment:
    """Rigidly rotate both ridge endpoints by ``angle`` about the world ``pivot`` (vertical axis)."""
    c, s = math.cos(angle), math.sin(angle)
    cx, cz = pivot

    def turn(p: GridPoint) -> GridPoint:
        x, z = to_world(p, tile_size)
        dx, dz = x - cx, z - cz
        return ((cx + dx * c + dz * s) / tile_size, (cz - dx * s + dz * c) / tile_size)

    return replace(seg, start=turn(seg.start), end=turn(seg.end))


def snap_angle(angle: float, step_deg: float) -> float:
    return math.radians(snap_value(math.degrees(angle), step_deg))


def translate_roof(
    seg: RoofSegment,
    delta: WorldPoint,
    axis: TranslateAxis = "free",
    *,
    tile_size: float = DEFAULT_CONFIG.tile_size,
    step: Optional[float] = None,
) -> RoofSegment:
    """Move the whole roof by ``delta`` (metres) projected onto ``axis``; ``step`` is in metres."""
    if axis == "free":
        dx, dz = float(delta[0]), float(delta[1])
    else:
        axes = ridge_axes(seg, tile_size)
        if axes is None:
            return seg
        v = axes[0] if axis == "ridge" else axes[1]
        along = dot(delta, v)
        dx, dz = along * v[0], along * v[1]
    if step is not None:
        dx, dz = snap_value(dx, step), snap_value(dz, step)
    return replace(
        seg,
        start=(seg.start[0] + dx / tile_size, seg.start[1] + dz / tile_size),
        end=(seg.end[0] + dx / tile_size, seg.end[1] + dz / tile_size),
    )


def snap_endpoints(seg: RoofSegment, precision: float = DEFAULT_CONFIG.roof_release_precision) -> RoofSegment:
    return replace(seg, start=_snap_point(seg.start, precision), end=_snap_point(seg.end, precision))
