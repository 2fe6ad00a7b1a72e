"""
Tests for the settings records and the visualization config union.
"""

import pytest

from field_studio.settings import (
    CONFIG_TYPES,
    GridFieldConfig,
    TopographyConfig,
    TurbulenceFieldConfig,
    config_for,
)


class TestConfigFor:
    @pytest.mark.parametrize("kind", ["grid", "flow", "turbulence", "topography", "circular"])
    def test_round_trip_kind(self, kind):
        cfg = config_for(kind)
        assert cfg.kind == kind
        assert cfg.animation.time == 0.0
        assert cfg.animation.is_animating

    def test_unknown_kind_lists_choices(self):
        with pytest.raises(ValueError, match="circular"):
            config_for("hexbin")

    def test_registry_of_types(self):
        assert set(CONFIG_TYPES) == {"grid", "flow", "turbulence", "topography", "circular"}


class TestDefaults:
    def test_grid_defaults(self):
        cfg = GridFieldConfig()
        assert cfg.grid.spacing == 30.0
        assert cfg.grid.layout == "rectangular"
        assert cfg.direction.enabled
        assert cfg.polarity.attract_to_poles

    def test_topography_defaults(self):
        topo = TopographyConfig().topography
        assert (topo.contour_interval, topo.min_elevation, topo.max_elevation) == (50.0, 0.0, 1000.0)
        assert topo.resolution == 1.0

    def test_turbulence_defaults(self):
        cfg = TurbulenceFieldConfig()
        assert cfg.noise.octaves == 4
        assert cfg.flow.base_velocity == 0.5
        assert cfg.streamlines.steps == 150

    def test_configs_do_not_share_state(self):
        a = GridFieldConfig()
        b = GridFieldConfig()
        a.grid.spacing = 10.0
        assert b.grid.spacing == 30.0
