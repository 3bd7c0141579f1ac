from __future__ import annotations

import copy
import math

import pytest

from floorgrid.geometry.openings import (
    clamp_center,
    nearest_wall,
    project_to_wall,
    spans_overlap,
    validate_placement,
)
from floorgrid.project.schema import WallMountedElement, WallSegment


def _wall(wall_id: str = "w1", start=(0.0, 0.0), end=(6.0, 0.0), **kw) -> WallSegment:
    return WallSegment(id=wall_id, start=start, end=end, **kw)


def _door(el_id: str, offset: float, wall_id: str = "w1", **kw) -> WallMountedElement:
    return WallMountedElement(id=el_id, element_type="door", parent_wall_id=wall_id, position=(offset, 0.0), **kw)


def test_door_scenario_overlap_then_free_slot() -> None:
    wall = _wall()
    existing = [_door("d1", 1.8)]

    blocked = validate_placement((2.1, 0.0), [wall], existing)
    assert blocked.nearest_wall is wall
    assert blocked.can_place is False

    free = validate_placement((4.8, 0.0), [wall], existing)
    assert free.can_place is True
    assert free.local_offset == pytest.approx(4.8)
    assert free.centered_position == pytest.approx((4.8, 0.0))
    assert free.rotation == pytest.approx(0.0)


def test_placement_is_pure_and_idempotent() -> None:
    walls = [_wall(), _wall("w2", (6.0, 0.0), (6.0, 6.0))]
    existing = [_door("d1", 3.0), _door("d2", 2.0, wall_id="w2")]
    walls_before = copy.deepcopy(walls)
    existing_before = copy.deepcopy(existing)

    first = validate_placement((5.4, 0.3), walls, existing, last_rotation=0.7)
    second = validate_placement((5.4, 0.3), walls, existing, last_rotation=0.7)
    assert first == second
    assert walls == walls_before
    assert existing == existing_before


def test_collision_is_symmetric() -> None:
    wall = _wall()
    a = _door("a", 2.0)
    b = _door("b", 3.0)
    assert validate_placement((3.0, 0.0), [wall], [a]).can_place is False
    assert validate_placement((2.0, 0.0), [wall], [b]).can_place is False


def test_touching_spans_do_not_collide() -> None:
    wall = _wall()
    assert validate_placement((4.0, 0.0), [wall], [_door("a", 2.0)]).can_place is True
    assert spans_overlap((1.0, 3.0), (3.0, 5.0)) is False
    assert spans_overlap((1.0, 3.0), (2.9, 5.0)) is True


def test_doors_and_windows_share_collision_domain() -> None:
    wall = _wall()
    window = WallMountedElement(id="win", element_type="window", parent_wall_id="w1", position=(3.0, 0.0))
    assert validate_placement((3.5, 0.0), [wall], [window]).can_place is False


def test_ignore_id_skips_the_moving_element() -> None:
    wall = _wall()
    existing = [_door("a", 2.0)]
    assert validate_placement((2.5, 0.0), [wall], existing).can_place is False
    assert validate_placement((2.5, 0.0), [wall], existing, ignore_id="a").can_place is True


def test_preview_and_other_wall_elements_are_ignored() -> None:
    wall = _wall()
    existing = [_door("p", 3.0, preview=True), _door("other", 3.0, wall_id="w9")]
    assert validate_placement((3.0, 0.0), [wall], existing).can_place is True


def test_cursor_at_endpoints_clamps_span_inside_wall() -> None:
    wall = _wall()
    at_start = validate_placement((0.0, 0.0), [wall])
    assert at_start.can_place is True
    assert at_start.grid_position == pytest.approx((0.0, 0.0))
    assert at_start.centered_position == pytest.approx((1.0, 0.0))

    past_end = validate_placement((6.5, 0.5), [wall])
    assert past_end.nearest_wall is wall
    assert past_end.grid_position == pytest.approx((6.0, 0.0))
    assert past_end.centered_position == pytest.approx((5.0, 0.0))


def test_wall_shorter_than_element_cannot_place() -> None:
    short = _wall("s", (0.0, 0.0), (1.5, 0.0))
    result = validate_placement((0.7, 0.0), [short])
    assert result.nearest_wall is short
    assert result.can_place is False
    assert result.local_offset is None
    assert clamp_center(0.7, 1.5, 2) is None
    assert clamp_center(0.2, 2.0, 2) == pytest.approx(1.0)


def test_free_floating_keeps_last_rotation() -> None:
    result = validate_placement((3.0, 5.0), [_wall()], last_rotation=1.2)
    assert result.nearest_wall is None
    assert result.can_place is False
    assert result.rotation == pytest.approx(1.2)
    assert result.grid_position == result.centered_position == (3.0, 5.0)


def test_nearest_wall_selection_and_threshold() -> None:
    w1 = _wall("w1", (0.0, 0.0), (6.0, 0.0))
    w2 = _wall("w2", (0.0, 2.0), (6.0, 2.0))
    assert validate_placement((3.0, 0.6), [w1, w2]).nearest_wall is w1
    assert validate_placement((3.0, 1.4), [w1, w2]).nearest_wall is w2
    # Equidistant: the first wall wins.
    assert validate_placement((3.0, 1.0), [w1, w2]).nearest_wall is w1
    assert nearest_wall((3.0, 1.0), [w1, w2], max_distance=0.5) is None


def test_invisible_and_degenerate_walls_are_skipped() -> None:
    hidden = _wall("h", visible=False)
    point = _wall("z", (3.0, 0.0), (3.0, 0.0))
    assert validate_placement((3.0, 0.0), [hidden, point]).nearest_wall is None
    assert project_to_wall((3.0, 0.0), point) is None


def test_diagonal_wall_rotation_and_projection() -> None:
    diag = _wall("d", (0.0, 0.0), (4.0, 4.0))
    assert validate_placement((3.0, 1.0), [diag]).nearest_wall is None

    result = validate_placement((3.0, 1.0), [diag], max_snap_distance=2.0)
    assert result.nearest_wall is diag
    assert result.rotation == pytest.approx(-math.pi / 4)
    assert result.grid_position == pytest.approx((2.0, 2.0))
    assert result.centered_position == pytest.approx((2.0, 2.0))
    assert result.local_offset == pytest.approx(2.0 * math.sqrt(2.0))
    assert result.can_place is True
