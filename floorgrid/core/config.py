from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping


@dataclass(frozen=True)
class EngineConfig:
    # Grid.
    tile_size: float = 0.5  # metres per grid unit
    grid_size: float = 30.0  # metres per side of the playable grid
    # Walls.
    wall_thickness: float = 0.2
    wall_height: float = 2.5
    # Wall-mounted elements.
    element_width_cells: int = 2
    max_snap_distance: float = 1.0  # grid units
    # Pointer gestures.
    double_click_window: float = 0.3  # seconds
    # History.
    undo_limit: int = 50
    # Roofs: widths in metres, heights in metres above the base.
    roof_left_width: float = 3.0
    roof_right_width: float = 3.0
    roof_height: float = 2.0
    roof_min_height: float = 0.5
    roof_max_height: float = 10.0
    roof_height_step: float = 0.1
    roof_min_width: float = 0.5
    roof_rotation_step_deg: float = 45.0
    roof_release_precision: float = 0.1
    roof_min_base: float = 0.5
    # Alt-held snapping divides the snap step by this factor.
    fine_step_divisor: int = 10

    @property
    def grid_divisions(self) -> int:
        return int(math.floor(self.grid_size / self.tile_size))

    @property
    def grid_intersections(self) -> int:
        return self.grid_divisions + 1

    def with_overrides(self, **overrides: Any) -> "EngineConfig":
        return config_from_mapping(overrides, base=self)


DEFAULT_CONFIG = EngineConfig()


def config_from_mapping(mapping: Mapping[str, Any], *, base: EngineConfig = DEFAULT_CONFIG) -> EngineConfig:
    known = {f.name: f for f in fields(EngineConfig)}
    unknown = sorted(set(mapping) - set(known))
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
    values: dict[str, Any] = {}
    for key, raw in mapping.items():
        current = getattr(base, key)
        value = int(raw) if isinstance(current, int) else float(raw)
        if value <= 0:
            raise ValueError(f"Config value {key} must be > 0, got {raw!r}")
        values[key] = value
    cfg = replace(base, **values)
    if cfg.roof_min_height > cfg.roof_max_height:
        raise ValueError("roof_min_height must not exceed roof_max_height")
    return cfg
