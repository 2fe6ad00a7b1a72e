"""
Tests for marching-squares contour extraction with exclusion clipping.
"""

import math

import numpy as np
import pytest

from field_studio.constants import EXCLUSION_RADIUS
from field_studio.contours import (
    ContourGrid,
    contour_levels,
    extract_contours,
    extract_level,
    grid_step,
    group_by_level,
    is_excluded,
    point_segment_distance,
    sample_contour_grid,
    segment_hits_exclusion,
)
from field_studio.settings import TopographySettings
from field_studio.sources import ElevationPoint


def _unit_cell(values):
    return ContourGrid(
        xs=np.array([0.0, 20.0]),
        ys=np.array([0.0, 20.0]),
        values=np.asarray(values, dtype=np.float64),
        step=20,
        excluded_cells=np.zeros((1, 1), dtype=bool),
    )


def _assert_clear_of_sources(lines, sources):
    for line in lines:
        for px, py in line.points:
            for src in sources:
                assert math.hypot(px - src.x, py - src.y) >= EXCLUSION_RADIUS
        for a, b in zip(line.points, line.points[1:]):
            for src in sources:
                assert point_segment_distance(src.x, src.y, a, b) >= EXCLUSION_RADIUS


class TestLevelsAndGrid:
    def test_default_levels(self, topography):
        levels = contour_levels(topography)
        assert len(levels) == 21
        assert levels[0] == 0.0
        assert levels[-1] == 1000.0

    def test_partial_interval(self):
        levels = contour_levels(TopographySettings(contour_interval=300.0, min_elevation=100.0, max_elevation=1000.0))
        assert levels == [100.0, 400.0, 700.0, 1000.0]

    @pytest.mark.parametrize("resolution, step", [(1.0, 20), (2.0, 10), (3.0, 6), (20.0, 2), (100.0, 2)])
    def test_grid_step(self, resolution, step):
        assert grid_step(TopographySettings(resolution=resolution)) == step

    def test_sample_grid_shape(self, single_peak, topography):
        grid = sample_contour_grid(single_peak, topography, 600.0, 400.0)
        assert grid.values.shape == (20, 30)
        assert grid.excluded_cells.shape == (19, 29)
        # cell centred at (290, 190) is 14.1 units from the peak
        assert grid.excluded_cells[9, 14]
        assert not grid.excluded_cells[0, 0]


class TestExclusionGeometry:
    def test_is_excluded_is_strict(self):
        src = [ElevationPoint(id="p", x=0.0, y=0.0)]
        assert is_excluded(19.9, 0.0, src)
        assert not is_excluded(20.0, 0.0, src)

    def test_point_segment_distance(self):
        assert point_segment_distance(5.0, 3.0, (0.0, 0.0), (10.0, 0.0)) == 3.0
        assert point_segment_distance(-4.0, 3.0, (0.0, 0.0), (10.0, 0.0)) == 5.0

    def test_zero_length_segment(self):
        assert point_segment_distance(3.0, 4.0, (0.0, 0.0), (0.0, 0.0)) == 5.0

    def test_segment_passing_through_disk(self):
        src = [ElevationPoint(id="p", x=50.0, y=0.0)]
        assert segment_hits_exclusion((0.0, 5.0), (100.0, 5.0), src)
        assert not segment_hits_exclusion((0.0, 30.0), (100.0, 30.0), src)


class TestExtractLevel:
    def test_single_crossing_pair(self, topography):
        grid = _unit_cell([[0.0, 100.0], [0.0, 100.0]])
        lines = extract_level(50.0, [], topography, 40.0, 40.0, grid=grid)
        assert len(lines) == 1
        np.testing.assert_allclose(lines[0].points, [(10.0, 0.0), (10.0, 20.0)])
        assert lines[0].elevation == 50.0
        assert not lines[0].closed

    def test_interpolation(self, topography):
        grid = _unit_cell([[0.0, 100.0], [0.0, 100.0]])
        lines = extract_level(25.0, [], topography, 40.0, 40.0, grid=grid)
        np.testing.assert_allclose(lines[0].points[0], (5.0, 0.0))

    def test_saddle_connects_every_pair(self, topography):
        grid = _unit_cell([[0.0, 100.0], [100.0, 0.0]])
        lines = extract_level(50.0, [], topography, 40.0, 40.0, grid=grid)
        assert len(lines) == 6
        assert lines[0].points == [(10.0, 0.0), (20.0, 10.0)]

    def test_crossings_inside_disk_dropped(self, topography):
        grid = _unit_cell([[0.0, 100.0], [100.0, 0.0]])
        src = [ElevationPoint(id="p", x=10.0, y=10.0)]
        assert extract_level(50.0, src, topography, 40.0, 40.0, grid=grid) == []

    def test_segment_through_disk_dropped(self, topography):
        grid = ContourGrid(
            xs=np.array([0.0, 100.0]),
            ys=np.array([0.0, 100.0]),
            values=np.array([[0.0, 100.0], [0.0, 100.0]]),
            step=100,
            excluded_cells=np.zeros((1, 1), dtype=bool),
        )
        src = [ElevationPoint(id="p", x=55.0, y=50.0)]
        assert extract_level(50.0, src, topography, 200.0, 200.0, grid=grid) == []

    def test_flat_field_has_no_contours(self, topography):
        grid = _unit_cell([[50.0, 50.0], [50.0, 50.0]])
        assert extract_level(50.0, [], topography, 40.0, 40.0, grid=grid) == []


class TestExtractContours:
    def test_empty_sources_give_no_contours(self, topography):
        assert extract_contours([], topography, 400.0, 300.0) == []

    def test_single_peak_only_crosses_its_own_level(self, single_peak, topography):
        lines = extract_contours(single_peak, topography, 600.0, 400.0)
        # a lone source flattens the terrain to its elevation, so only
        # micro-relief around 800 can produce crossings
        assert {line.elevation for line in lines} <= {800.0}
        _assert_clear_of_sources(lines, single_peak)

    def test_peak_and_valley_give_many_levels(self, peak_and_valley, topography):
        lines = extract_contours(peak_and_valley, topography, 600.0, 400.0)
        levels = {line.elevation for line in lines}
        assert len(levels) > 5
        assert levels <= set(contour_levels(topography))
        _assert_clear_of_sources(lines, peak_and_valley)

    def test_all_fragments_are_two_point_segments(self, peak_and_valley, topography):
        lines = extract_contours(peak_and_valley, topography, 600.0, 400.0)
        assert lines
        assert all(len(line.points) == 2 for line in lines)

    def test_matches_per_level_extraction(self, peak_and_valley, topography):
        combined = extract_contours(peak_and_valley, topography, 400.0, 300.0)
        per_level = []
        for level in contour_levels(topography):
            per_level.extend(extract_level(level, peak_and_valley, topography, 400.0, 300.0))
        assert [ln.points for ln in combined] == [ln.points for ln in per_level]

    def test_deterministic(self, peak_and_valley, topography):
        first = extract_contours(peak_and_valley, topography, 600.0, 400.0)
        second = extract_contours(peak_and_valley, topography, 600.0, 400.0)
        assert first
        assert first == second

    def test_group_by_level(self, peak_and_valley, topography):
        lines = extract_contours(peak_and_valley, topography, 600.0, 400.0)
        grouped = group_by_level(lines)
        assert sum(len(v) for v in grouped.values()) == len(lines)
        for level, fragments in grouped.items():
            assert all(f.elevation == level for f in fragments)
