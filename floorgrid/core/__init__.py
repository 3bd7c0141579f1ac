from floorgrid.core.config import DEFAULT_CONFIG, EngineConfig, config_from_mapping
from floorgrid.core.coordinates import GridPoint, GridSpec, distance, direction, to_grid, to_world

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "config_from_mapping",
    "GridPoint",
    "GridSpec",
    "distance",
    "direction",
    "to_grid",
    "to_world",
]
