from __future__ import annotations

import pytest

from floorgrid.design.roof_builder import RoofBuilder, ridge_from_rectangle
from floorgrid.design.room_builder import RectRoomBuilder, rectangle_sides
from floorgrid.design.wall_builder import WallBuilder
from floorgrid.ops.events import GRID_CLICK, GRID_MOVE, EventSource, PointerEvent
from floorgrid.project.history import UndoHistory
from floorgrid.project.schema import Floor
from floorgrid.project.store import InMemoryNodeStore


def _setup():
    store = InMemoryNodeStore()
    store.add(Floor(id="f1", name="Ground"))
    return store, UndoHistory(store)


def test_rectangle_sides() -> None:
    sides = rectangle_sides((0, 0), (4, 3))
    assert sides["Top"] == ((0, 3), (4, 3))
    assert sides["Bottom"] == ((0, 0), (4, 0))
    assert sides["Left"] == ((0, 0), (0, 3))
    assert sides["Right"] == ((4, 0), (4, 3))


def test_rect_room_two_clicks() -> None:
    store, history = _setup()
    builder = RectRoomBuilder(store, "f1", history=history)
    builder.click((0, 0))
    group = store.get(builder.group_id)
    assert group.preview is True
    assert group.name == "Room 1 Preview"

    builder.move((4, 3))
    group_id = builder.click((4, 3))
    assert group_id is not None
    group = store.get(group_id)
    assert group.name == "Room 1"
    assert group.preview is False
    assert group.closed is True
    walls = {w.name: w for w in store.children(group_id, "wall")}
    assert sorted(walls) == ["Wall Bottom", "Wall Left", "Wall Right", "Wall Top"]
    assert (walls["Wall Top"].start, walls["Wall Top"].end) == ((0.0, 3.0), (4.0, 3.0))
    assert all(not w.preview for w in walls.values())
    assert history.undo_depth == 1


def test_rect_room_ignores_degenerate_second_click() -> None:
    store, _ = _setup()
    builder = RectRoomBuilder(store, "f1")
    builder.click((0, 0))
    assert builder.click((4, 0)) is None
    assert builder.start == (0.0, 0.0)
    assert builder.click((4, 2)) is not None

    builder.click((10, 10))
    builder.dispose()
    assert len(store.children("f1", "room")) == 1


def test_ridge_from_rectangle_runs_along_longer_side() -> None:
    start, end, width = ridge_from_rectangle((10, 4), (0, 0))
    assert (start, end) == ((0.0, 2.0), (10.0, 2.0))
    assert width == pytest.approx(1.0)

    start, end, width = ridge_from_rectangle((0, 0), (4, 10))
    assert (start, end) == ((2.0, 0.0), (2.0, 10.0))
    assert width == pytest.approx(1.0)

    assert ridge_from_rectangle((0, 0), (0.5, 4)) is None
    assert ridge_from_rectangle((0, 0), (1, 10)) is not None


def test_roof_builder_preview_and_commit() -> None:
    store, history = _setup()
    events = EventSource()
    builder = RoofBuilder(store, "f1", history=history).attach(events)
    events.emit(GRID_CLICK, PointerEvent("click", (0, 0)))
    assert builder.preview_id is None

    events.emit(GRID_MOVE, PointerEvent("move", (10, 4)))
    preview = store.get(builder.preview_id)
    assert preview.preview is True
    assert (preview.start, preview.end) == ((0.0, 2.0), (10.0, 2.0))
    assert preview.left_width == pytest.approx(1.0)
    assert preview.right_width == pytest.approx(1.0)
    assert preview.height == pytest.approx(2.5)

    events.emit(GRID_MOVE, PointerEvent("move", (0.5, 4)))
    assert builder.preview_id is None
    assert store.children("f1", "roof") == []

    events.emit(GRID_CLICK, PointerEvent("click", (10, 4)))
    roofs = store.children("f1", "roof")
    assert len(roofs) == 1
    assert roofs[0].name == "Roof"
    assert roofs[0].preview is False
    assert history.undo_depth == 1
    builder.dispose()
    assert events.listener_count() == 0


def test_roof_builder_too_small_creates_nothing() -> None:
    store, history = _setup()
    builder = RoofBuilder(store, "f1", history=history)
    builder.click((0, 0))
    assert builder.click((0.5, 0.5)) is None
    assert builder.start is None
    assert len(store) == 1
    assert history.undo_depth == 0


def test_wall_builder_shift_snaps_end_point() -> None:
    store, history = _setup()
    builder = WallBuilder(store, "f1", history=history)
    builder.click((0, 0))
    assert builder.move((3, 1), shift=True) == (3.0, 0.0)
    wall_id = builder.click((3, 1), shift=True)
    wall = store.get(wall_id)
    assert (wall.start, wall.end) == ((0.0, 0.0), (3.0, 0.0))
    assert wall.name == "Wall"
    assert wall.preview is False
    assert history.undo_depth == 1

    builder.click((0, 0))
    free_id = builder.click((3, 1))
    assert store.get(free_id).end == (3.0, 1.0)


def test_wall_builder_ignores_zero_length() -> None:
    store, _ = _setup()
    builder = WallBuilder(store, "f1")
    builder.click((2, 2))
    assert builder.click((2, 2)) is None
    assert builder.start == (2.0, 2.0)
    builder.dispose()
    assert store.children("f1", "wall") == []


def test_rect_room_restarts_after_preview_is_undone() -> None:
    store, history = _setup()
    history.push(label="empty floor")
    builder = RectRoomBuilder(store, "f1", history=history)
    builder.click((0, 0))
    builder.move((4, 3))
    history.undo()

    builder.move((5, 5))
    assert builder.start is None
    assert builder.click((1, 1)) is None
    assert builder.start == (1.0, 1.0)
    assert len(store.children("f1", "room")) == 1


def test_roof_builder_recreates_undone_preview() -> None:
    store, history = _setup()
    history.push(label="empty floor")
    builder = RoofBuilder(store, "f1", history=history)
    builder.click((0, 0))
    builder.move((10, 4))
    history.undo()

    roof_id = builder.click((10, 4))
    assert roof_id is not None
    assert store.get(roof_id).name == "Roof"
    assert len(store.children("f1", "roof")) == 1


def test_wall_builder_recreates_undone_preview() -> None:
    store, history = _setup()
    history.push(label="empty floor")
    builder = WallBuilder(store, "f1", history=history)
    builder.click((0, 0))
    history.undo()

    wall = store.get(builder.click((3, 0)))
    assert (wall.start, wall.end) == ((0.0, 0.0), (3.0, 0.0))
    assert len(store.children("f1", "wall")) == 1
