from floorgrid.design.element_tool import ElementTool
from floorgrid.design.polygon_builder import PolygonBuilder, next_room_number
from floorgrid.design.roof_builder import RoofBuilder, ridge_from_rectangle
from floorgrid.design.room_builder import RectRoomBuilder, rectangle_sides
from floorgrid.design.snapping import snap_to_axis
from floorgrid.design.wall_builder import WallBuilder

__all__ = [
    "ElementTool",
    "PolygonBuilder",
    "next_room_number",
    "RoofBuilder",
    "ridge_from_rectangle",
    "RectRoomBuilder",
    "rectangle_sides",
    "snap_to_axis",
    "WallBuilder",
]
