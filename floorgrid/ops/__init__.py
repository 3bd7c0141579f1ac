from floorgrid.ops.drag import HANDLE_KINDS, RoofDragSession, roof_drag
from floorgrid.ops.events import DoubleClickDetector, EventSource, PointerEvent
from floorgrid.ops.roof_ops import (
    base_centroid,
    drag_edge,
    drag_height,
    ridge_axes,
    rotate_roof,
    snap_angle,
    snap_endpoints,
    snap_value,
    translate_roof,
    wrap_angle,
)

__all__ = [
    "HANDLE_KINDS",
    "RoofDragSession",
    "roof_drag",
    "DoubleClickDetector",
    "EventSource",
    "PointerEvent",
    "base_centroid",
    "drag_edge",
    "drag_height",
    "ridge_axes",
    "rotate_roof",
    "snap_angle",
    "snap_endpoints",
    "snap_value",
    "translate_roof",
    "wrap_angle",
]
