"""
Tests for the FieldStudioAPI facade.
"""

from dataclasses import replace

import matplotlib.pyplot as plt
import numpy as np
import pytest

from field_studio.api import FieldStudioAPI
from field_studio.clock import AnimationClock
from field_studio.constants import FRAME_TIME
from field_studio.noise import NoiseConfig
from field_studio.settings import CircularFieldSettings, StreamlineSettings
from field_studio.sources import Pole


@pytest.fixture
def api():
    return FieldStudioAPI(width=600.0, height=400.0, seed=0)


class TestRegistriesAndConfigs:
    def test_registry_per_kind(self, api):
        assert api.registry("grid").source_type is Pole
        assert api.registry("flow").source_type is Pole
        assert api.registry("circular").source_type is Pole
        assert api.registry("topography") is api.elevation_points
        assert api.registry("turbulence") is api.turbulence_sources

    def test_registries_are_independent(self, api):
        api.registry("grid").add("attractor", 10, 10)
        assert len(api.registry("grid")) == 1
        assert len(api.registry("flow")) == 0
        assert len(api.registry("circular")) == 0

    def test_unknown_kind(self, api):
        with pytest.raises(ValueError):
            api.registry("mandelbrot")
        with pytest.raises(ValueError):
            api.config("mandelbrot")

    def test_update_config(self, api):
        cfg = api.update_config("turbulence", intensity=0.0)
        assert cfg.intensity == 0.0
        assert api.config("turbulence") is cfg

    def test_injected_clock(self):
        clock = AnimationClock(speed_multiplier=3.0)
        assert FieldStudioAPI(clock=clock).clock is clock


class TestAnimation:
    def test_tick_mirrors_state(self, api):
        t = api.tick()
        assert t == FRAME_TIME
        assert all(cfg.animation.time == FRAME_TIME for cfg in api.configs.values())

    def test_tick_when_paused(self, api):
        api.clock.pause()
        api.tick()
        assert api.time == 0.0
        assert api.config("grid").animation.is_animating is False

    def test_run_frames(self, api, capsys):
        seen = []
        t = api.run_frames(5, lambda i, studio: seen.append((i, studio.time)), verbose=True)
        assert [i for i, _ in seen] == [0, 1, 2, 3, 4]
        np.testing.assert_allclose(t, 5 * FRAME_TIME)
        np.testing.assert_allclose(seen[-1][1], t)
        assert "Frame 5/5" in capsys.readouterr().out


class TestQueries:
    def test_flow_vector_points_toward_attractor(self, api):
        api.registry("flow").add("attractor", 200, 300, strength=100.0)
        sample = api.vector_at(300.0, 300.0, kind="flow")
        np.testing.assert_allclose(sample.field_x, -1.0 / 11.0, rtol=1e-12)

    def test_grid_vector_includes_bias(self, api):
        sample = api.vector_at(300.0, 300.0)
        assert sample.magnitude > 0.0

    def test_vector_at_rejects_other_kinds(self, api):
        with pytest.raises(ValueError):
            api.vector_at(0.0, 0.0, kind="topography")

    def test_elevation_at(self, api):
        assert api.elevation_at(10.0, 10.0) == 0.0
        api.elevation_points.add("peak", 100, 100, elevation=700.0)
        assert api.elevation_at(100.0, 100.0) == 700.0

    def test_slope_at(self, api):
        api.elevation_points.add("valley", 0, 0, elevation=0.0)
        api.elevation_points.add("peak", 300, 0, elevation=1000.0)
        assert api.slope_at(150.0, 0.0).field_x > 0.0

    def test_turbulence_at(self, api):
        api.update_config("turbulence", noise=NoiseConfig(octaves=0), intensity=0.0)
        sample = api.turbulence_at(50.0, 50.0)
        np.testing.assert_allclose([sample.field_x, sample.field_y], [0.5, 0.0], atol=1e-15)


class TestBatchGeometry:
    def test_contours_verbose(self, api, capsys):
        api.elevation_points.add("peak", 150, 200, elevation=900.0, radius=150.0)
        api.elevation_points.add("valley", 450, 200, elevation=100.0, radius=150.0)
        lines = api.contours(verbose=True)
        assert lines
        out = capsys.readouterr().out
        assert "Level 1/21" in out
        assert "Level 21/21" in out

    def test_streamlines_from_explicit_seeds(self, api):
        cfg = api.config("turbulence")
        api.update_config(
            "turbulence",
            noise=NoiseConfig(octaves=0),
            intensity=0.0,
            streamlines=replace(cfg.streamlines, steps=10, step_size=3.0),
        )
        lines = api.streamlines(seeds=[(10.0, 10.0), (20.0, 300.0)])
        assert len(lines) == 2
        np.testing.assert_allclose(np.array(lines[1])[:, 1], 300.0)
        assert len(lines[0]) == 10

    def test_streamlines_default_seeds(self, api):
        api.update_config("turbulence", streamlines=StreamlineSettings(line_count=12, steps=5))
        lines = api.streamlines()
        assert len(lines) == 12
        assert all(1 <= len(line) <= 5 for line in lines)

    def test_grid_lines(self):
        studio = FieldStudioAPI(width=90.0, height=60.0)
        assert len(studio.grid_lines()) == 6

    def test_circular_lines(self, api):
        api.registry("circular").add("attractor", 300, 200)
        lines = api.circular_lines()
        assert len(lines) == 24

    def test_particles_follow_config(self, api):
        api.update_config("flow", particle_count=15)
        assert len(api.particles) == 15
        assert isinstance(api.step_particles(), int)

    def test_seeded_particles_reproducible(self):
        a = FieldStudioAPI(seed=4)
        b = FieldStudioAPI(seed=4)
        for studio in (a, b):
            studio.registry("flow").insert(Pole(id="v", x=600.0, y=400.0, kind="vortex"))
            for _ in range(10):
                studio.step_particles()
        np.testing.assert_array_equal(a.particles.positions, b.particles.positions)


class TestRendering:
    def test_export_svg(self, api):
        api.registry("circular").add("attractor", 300, 200)
        svg = api.export_svg("circular")
        assert svg.startswith("<svg")
        assert svg.count("<polygon") == 24

    def test_circular_default_style_follows_settings(self, api):
        api.update_config("circular", circular=CircularFieldSettings(line_weight=2.5, opacity=0.4))
        style = api.default_style("circular")
        assert (style.line_width, style.opacity) == (2.5, 0.4)
        api.registry("circular").add("attractor", 300, 200)
        svg = api.export_svg("circular")
        assert 'stroke-width="2.5"' in svg
        assert 'stroke-opacity="0.4"' in svg

    def test_render_flow(self, api):
        fig, ax = plt.subplots()
        assert api.render("flow", ax=ax) is ax
        plt.close(fig)

    def test_saved_renders_close_their_figures(self, tmp_path):
        plt.close("all")
        studio = FieldStudioAPI(width=200.0, height=200.0)
        studio.elevation_points.add("peak", 60, 100, elevation=900.0)
        studio.elevation_points.add("valley", 140, 100, elevation=100.0)
        for i in range(5):
            studio.render("topography", fname=str(tmp_path / f"topography_{i}.png"))
        assert plt.get_fignums() == []

    def test_unknown_kind(self, api):
        with pytest.raises(ValueError):
            api.export_svg("voronoi")
