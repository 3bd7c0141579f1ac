from .placement import (
    PlacementResult,
    WallProjection,
    clamp_center,
    element_span,
    nearest_wall,
    overlaps_existing,
    project_to_wall,
    spans_overlap,
    validate_placement,
)

__all__ = [
    "PlacementResult",
    "WallProjection",
    "clamp_center",
    "element_span",
    "nearest_wall",
    "overlaps_existing",
    "project_to_wall",
    "spans_overlap",
    "validate_placement",
]
