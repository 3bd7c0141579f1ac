from __future__ import annotations

import pytest

from floorgrid.design.polygon_builder import PolygonBuilder
from floorgrid.design.snapping import snap_to_axis
from floorgrid.ops.events import GRID_CLICK, GRID_DOUBLE_CLICK, GRID_MOVE, EventSource, PointerEvent
from floorgrid.project.history import UndoHistory
from floorgrid.project.schema import Floor
from floorgrid.project.store import InMemoryNodeStore


def _setup():
    store = InMemoryNodeStore()
    store.add(Floor(id="f1", name="Ground"))
    history = UndoHistory(store)
    return store, history, PolygonBuilder(store, "f1", history=history)


def test_snap_to_axis_picks_smallest_deviation() -> None:
    # |dy| = 1 beats ||dx| - |dy|| = 2 and |dx| = 3: horizontal.
    assert snap_to_axis((0, 0), (3, 1)) == (3.0, 0.0)
    assert snap_to_axis((0, 0), (3, 3)) == (3.0, 3.0)
    assert snap_to_axis((0, 0), (3, 0.2)) == (3.0, 0.0)
    assert snap_to_axis((0, 0), (1, 3)) == (0.0, 3.0)
    assert snap_to_axis((1, 1), (-2, -1.5)) == (-1.5, -1.5)


def test_snap_ties_prefer_diagonal() -> None:
    assert snap_to_axis((0, 0), (2, 1)) == (1.0, 1.0)
    assert snap_to_axis((0, 0), (0, 0)) == (0.0, 0.0)


def test_closing_scenario_commits_three_wall_loop() -> None:
    store, history, builder = _setup()
    assert builder.state == "empty"
    builder.click((0, 0))
    assert builder.state == "drawing"
    cursor = store.get(builder.cursor_wall_id)
    assert cursor.is_degenerate and cursor.preview

    assert builder.move((4, 0.3)) == (4.0, 0.0)
    assert store.get(builder.cursor_wall_id).end == (4.0, 0.0)
    builder.click((4, 0))
    builder.click((4, 4))
    assert builder.points == [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0)]
    assert len(builder.placed_wall_ids) == 2

    builder.move((0, 0))
    assert builder.closing is True
    assert store.get(builder.cursor_wall_id).end == (0.0, 0.0)

    group_id = builder.click((0, 0))
    assert group_id is not None
    group = store.get(group_id)
    assert group.preview is False
    assert group.closed is True
    assert group.name == "Room 1"
    walls = store.children(group_id, "wall")
    assert sorted(w.name for w in walls) == ["Wall 1", "Wall 2", "Wall 3"]
    assert all(not w.preview for w in walls)
    closing = next(w for w in walls if w.name == "Wall 3")
    assert (closing.start, closing.end) == ((4.0, 4.0), (0.0, 0.0))

    assert builder.state == "empty"
    assert builder.cursor_wall_id is None
    assert history.undo_depth == 1
    history.undo()
    assert len(store) == 1


def test_room_numbers_increment() -> None:
    store, _, builder = _setup()
    for _ in range(2):
        for p in [(0, 0), (4, 0), (4, 4), (0, 0)]:
            gid = builder.click(p)
    assert store.get(gid).name == "Room 2"


def test_closing_needs_three_points() -> None:
    _, _, builder = _setup()
    builder.click((0, 0))
    builder.click((4, 0))
    builder.move((0, 0))
    assert builder.closing is False


def test_hovering_away_from_first_point_clears_closing() -> None:
    _, _, builder = _setup()
    for p in [(0, 0), (4, 0), (4, 4)]:
        builder.click(p)
    builder.move((0, 0))
    assert builder.closing is True
    builder.move((0, 4))
    assert builder.closing is False


def test_double_click_finishes_open_polyline() -> None:
    store, history, builder = _setup()
    builder.click((0, 0))
    assert builder.double_click() is None
    builder.click((4, 0))
    cursor_id = builder.cursor_wall_id
    group_id = builder.double_click()
    assert group_id is not None
    group = store.get(group_id)
    assert group.closed is False
    assert group.preview is False
    walls = store.children(group_id, "wall")
    assert [(w.start, w.end, w.name) for w in walls] == [((0.0, 0.0), (4.0, 0.0), "Wall 1")]
    assert store.find(cursor_id) is None
    assert history.undo_depth == 1


def test_click_without_movement_is_a_no_op() -> None:
    store, _, builder = _setup()
    builder.click((0, 0))
    builder.click((0, 0))
    assert builder.points == [(0.0, 0.0)]
    assert builder.placed_wall_ids == []
    assert len(store.children(builder.group_id, "wall")) == 1


def test_move_before_first_click_does_nothing() -> None:
    store, _, builder = _setup()
    assert builder.move((3, 3)) is None
    assert len(store) == 1


def test_dispose_removes_preview_geometry() -> None:
    store, history, builder = _setup()
    events = EventSource()
    builder.attach(events)
    events.emit(GRID_CLICK, PointerEvent("click", (0, 0)))
    events.emit(GRID_MOVE, PointerEvent("move", (3, 0.4)))
    events.emit(GRID_CLICK, PointerEvent("click", (3, 0)))
    assert len(store) > 1

    builder.dispose()
    assert len(store) == 1
    assert events.listener_count() == 0
    assert builder.state == "empty"
    assert history.undo_depth == 0


def test_event_driven_double_click() -> None:
    store, _, builder = _setup()
    events = EventSource()
    builder.attach(events)
    events.emit(GRID_CLICK, PointerEvent("click", (0, 0)))
    events.emit(GRID_CLICK, PointerEvent("click", (0, 5)))
    events.emit(GRID_DOUBLE_CLICK, PointerEvent("double_click", (0, 5)))
    rooms = store.children("f1", "room")
    assert [r.name for r in rooms] == ["Room 1"]
    assert rooms[0].points == [(0.0, 0.0), (0.0, 5.0)]


@pytest.mark.parametrize("cursor,expected", [((5, 1), (5.0, 0.0)), ((1, 5), (0.0, 5.0)), ((4, 5), (4.0, 4.0))])
def test_cursor_wall_follows_snapped_cursor(cursor, expected) -> None:
    store, _, builder = _setup()
    builder.click((0, 0))
    builder.move(cursor)
    wall = store.get(builder.cursor_wall_id)
    assert wall.start == (0.0, 0.0)
    assert wall.end == expected


def test_undo_during_gesture_resets_builder() -> None:
    store, history, builder = _setup()
    history.push(label="empty floor")
    builder.click((0, 0))
    builder.click((4, 0))
    history.undo()

    assert builder.move((4, 4)) is None
    assert builder.state == "empty"
    assert builder.double_click() is None

    builder.click((1, 1))
    assert builder.state == "drawing"
    assert len(store.children("f1", "room")) == 1


def test_missing_cursor_wall_is_recreated() -> None:
    store, _, builder = _setup()
    builder.click((0, 0))
    store.delete(builder.cursor_wall_id)
    assert builder.move((4, 0.2)) == (4.0, 0.0)
    cursor = store.get(builder.cursor_wall_id)
    assert (cursor.start, cursor.end) == ((0.0, 0.0), (4.0, 0.0))
