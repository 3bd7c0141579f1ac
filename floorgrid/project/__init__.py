"""
Floorgrid Project Module

Node records, the node store boundary and snapshot undo history.
"""

from floorgrid.project.history import UndoHistory
from floorgrid.project.schema import (
    Floor,
    InvalidRecordError,
    RoofSegment,
    RoomGroup,
    WallMountedElement,
    WallSegment,
    record_from_dict,
)
from floorgrid.project.store import InMemoryNodeStore, NodeNotFoundError, NodeStore, StoreSnapshot

__all__ = [
    "Floor",
    "InvalidRecordError",
    "RoofSegment",
    "RoomGroup",
    "WallMountedElement",
    "WallSegment",
    "record_from_dict",
    "InMemoryNodeStore",
    "NodeNotFoundError",
    "NodeStore",
    "StoreSnapshot",
    "UndoHistory",
]
