from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Dict, List

from floorgrid.core.config import DEFAULT_CONFIG
from floorgrid.design.snapping import snap_to_axis
from floorgrid.geometry.openings import PlacementResult, validate_placement
from floorgrid.geometry.roof import roof_geometry
from floorgrid.project.schema import RoofSegment, WallMountedElement, WallSegment


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def _cmd_snap(args: argparse.Namespace) -> int:
    x, y = snap_to_axis((args.last_x, args.last_y), (args.x, args.y))
    _print_json([x, y])
    return 0


def _cmd_roof(args: argparse.Namespace) -> int:
    seg = RoofSegment(
        id="cli",
        start=(args.start_x, args.start_y),
        end=(args.end_x, args.end_y),
        left_width=args.left,
        right_width=args.right,
        height=args.height,
    )
    geom = roof_geometry(seg, args.base, tile_size=args.tile_size)
    if geom is None:
        _print_json([])
        return 0
    _print_json({name: [[list(p) for p in tri] for tri in tris] for name, tris in geom.faces().items()})
    return 0


def _placement_payload(result: PlacementResult) -> Dict[str, Any]:
    return {
        "grid_position": list(result.grid_position),
        "centered_position": list(result.centered_position),
        "rotation": result.rotation,
        "can_place": result.can_place,
        "nearest_wall": None if result.nearest_wall is None else result.nearest_wall.id,
        "local_offset": result.local_offset,
    }


def _cmd_place(args: argparse.Namespace) -> int:
    wall_data = json.loads(args.wall)
    wall_data.setdefault("id", "wall")
    wall = WallSegment(**wall_data)
    existing: List[WallMountedElement] = []
    for i, raw in enumerate(json.loads(args.existing)):
        data = dict(raw)
        data.setdefault("id", f"element_{i + 1}")
        data.setdefault("parent_wall_id", wall.id)
        existing.append(WallMountedElement(**data))
    result = validate_placement(
        (args.x, args.y),
        [wall],
        existing,
        width_cells=args.width,
        max_snap_distance=args.max_distance,
    )
    _print_json(_placement_payload(result))
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="floorgrid")
    p.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("snap", help="Snap a cursor to the axis or diagonal through the last vertex.")
    s.add_argument("last_x", type=float)
    s.add_argument("last_y", type=float)
    s.add_argument("x", type=float)
    s.add_argument("y", type=float)
    s.set_defaults(func=_cmd_snap)

    r = sub.add_parser("roof", help="Print gable roof faces (world coordinates) for a ridge line.")
    r.add_argument("start_x", type=float)
    r.add_argument("start_y", type=float)
    r.add_argument("end_x", type=float)
    r.add_argument("end_y", type=float)
    r.add_argument("--left", type=float, default=DEFAULT_CONFIG.roof_left_width, help="Left slope width in metres")
    r.add_argument("--right", type=float, default=DEFAULT_CONFIG.roof_right_width, help="Right slope width in metres")
    r.add_argument("--height", type=float, default=DEFAULT_CONFIG.roof_height, help="Ridge height above the base")
    r.add_argument("--base", type=float, default=0.0, help="Base height")
    r.add_argument("--tile-size", type=float, default=DEFAULT_CONFIG.tile_size)
    r.set_defaults(func=_cmd_roof)

    pl = sub.add_parser("place", help="Validate a door/window placement on one wall.")
    pl.add_argument("wall", help='Wall JSON, e.g. {"start": [0, 0], "end": [6, 0]}')
    pl.add_argument("x", type=float)
    pl.add_argument("y", type=float)
    pl.add_argument("--existing", default="[]", help="JSON list of elements already on the wall")
    pl.add_argument("--width", type=int, default=DEFAULT_CONFIG.element_width_cells)
    pl.add_argument("--max-distance", type=float, default=DEFAULT_CONFIG.max_snap_distance)
    pl.set_defaults(func=_cmd_place)

    args = p.parse_args(argv)
    logging.basicConfig(level=str(args.log_level).upper(), format="%(levelname)s %(name)s: %(message)s")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
