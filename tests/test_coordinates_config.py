from __future__ import annotations

import math

import pytest

from floorgrid.core.config import DEFAULT_CONFIG, EngineConfig, config_from_mapping
from floorgrid.core.coordinates import (
    GridSpec,
    angle_of,
    direction,
    distance,
    lerp,
    points_equal,
    rotate90,
    to_grid,
    to_world,
    to_world_array,
)


def test_to_world_scales_by_tile_size() -> None:
    assert to_world((2.0, 3.0), 0.5) == (1.0, 1.5)
    arr = to_world_array([(0, 0), (4, 2)], 0.5)
    assert arr.tolist() == [[0.0, 0.0], [2.0, 1.0]]


def test_to_grid_rounds_to_nearest_intersection() -> None:
    assert to_grid((1.26, 0.74), 0.5) == (3.0, 1.0)
    assert to_grid((1.25, 0.25), 0.5) == (3.0, 1.0)
    assert to_grid((-0.25, 0.0), 0.5, divisions=60) == (0.0, 0.0)
    assert to_grid((30.0, 30.0), 0.5, divisions=60) == (60.0, 60.0)


def test_to_grid_out_of_range_is_none() -> None:
    assert to_grid((-1.0, 0.0), 0.5, divisions=60) is None
    assert to_grid((30.3, 0.0), 0.5, divisions=60) is None


def test_to_grid_rejects_non_positive_tile() -> None:
    with pytest.raises(ValueError):
        to_grid((1.0, 1.0), 0.0)


def test_grid_spec_is_centred_on_world_origin() -> None:
    spec = GridSpec()
    assert spec.divisions == 60
    assert spec.grid_to_world((0, 0)) == (-15.0, -15.0)
    assert spec.world_to_grid((0.0, 0.0)) == (30.0, 30.0)
    assert spec.world_to_grid((15.4, 0.0)) is None
    assert spec.contains((60, 60))
    assert not spec.contains((61, 0))


def test_grid_spec_from_config() -> None:
    spec = GridSpec.from_config(DEFAULT_CONFIG.with_overrides(grid_size=10.0, tile_size=1.0))
    assert spec.divisions == 10
    assert spec.offset == (-5.0, -5.0)


def test_vector_helpers() -> None:
    assert distance((0, 0), (3, 4)) == pytest.approx(5.0)
    assert direction((0, 0), (0, 0)) == (0.0, 0.0)
    assert direction((1, 1), (1, 3)) == pytest.approx((0.0, 1.0))
    assert rotate90((1.0, 0.0)) == (0.0, 1.0)
    assert lerp((0, 0), (4, 2), 0.25) == pytest.approx((1.0, 0.5))
    assert angle_of((0, 0), (0, 1)) == pytest.approx(-math.pi / 2)
    assert points_equal((1.0, 2.0), (1.0 + 1e-12, 2.0))
    assert not points_equal((1.0, 2.0), (1.1, 2.0))


def test_default_config_grid_counts() -> None:
    assert DEFAULT_CONFIG.grid_divisions == 60
    assert DEFAULT_CONFIG.grid_intersections == 61
    assert DEFAULT_CONFIG.wall_thickness == pytest.approx(0.2)
    assert DEFAULT_CONFIG.undo_limit == 50


def test_config_from_mapping_overrides() -> None:
    cfg = config_from_mapping({"tile_size": 0.25, "undo_limit": "5"})
    assert isinstance(cfg, EngineConfig)
    assert cfg.grid_divisions == 120
    assert cfg.undo_limit == 5
    assert isinstance(cfg.undo_limit, int)
    assert DEFAULT_CONFIG.tile_size == 0.5


def test_config_from_mapping_rejects_bad_values() -> None:
    with pytest.raises(ValueError, match="Unknown"):
        config_from_mapping({"tile": 1.0})
    with pytest.raises(ValueError):
        config_from_mapping({"wall_height": -1.0})
    with pytest.raises(ValueError):
        config_from_mapping({"roof_min_height": 20.0})
