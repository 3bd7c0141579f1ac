from __future__ import annotations

import pytest

from floorgrid.geometry.bounds import floor_bounds, roof_footprint_grid
from floorgrid.project.schema import RoofSegment, WallMountedElement, WallSegment


def test_empty_floor_has_no_bounds() -> None:
    assert floor_bounds([], tile_size=0.5) is None
    hidden = WallSegment(id="w1", start=(0, 0), end=(4, 0), visible=False)
    assert floor_bounds([hidden], tile_size=0.5) is None


def test_thin_axis_is_grown_to_minimum_size() -> None:
    b = floor_bounds([WallSegment(id="w1", start=(0, 0), end=(10, 0))], tile_size=0.5)
    assert b is not None
    assert (b.min_x, b.max_x) == pytest.approx((0.0, 10.0))
    assert (b.min_y, b.max_y) == pytest.approx((-3.0, 3.0))
    assert b.center == pytest.approx((5.0, 0.0))


def test_roof_footprint_widths_are_metres() -> None:
    roof = RoofSegment(id="r1", start=(0, 0), end=(10, 0), left_width=3.0, right_width=3.0)
    corners = roof_footprint_grid(roof, 0.5)
    assert sorted(round(y, 9) for _, y in corners) == [-6.0, -6.0, 6.0, 6.0]

    b = floor_bounds([], [roof], tile_size=0.5)
    assert b is not None
    assert b.depth == pytest.approx(12.0)
    assert b.width == pytest.approx(10.0)


def test_only_free_elements_extend_bounds() -> None:
    wall = WallSegment(id="w1", start=(0, 0), end=(10, 10))
    free = WallMountedElement(id="d1", position=(20.0, 5.0))
    mounted = WallMountedElement(id="d2", parent_wall_id="w1", position=(40.0, 0.0))
    b = floor_bounds([wall], elements=[free, mounted], tile_size=0.5)
    assert b is not None
    assert b.max_x == pytest.approx(20.0)
    assert (b.min_y, b.max_y) == pytest.approx((0.0, 10.0))
