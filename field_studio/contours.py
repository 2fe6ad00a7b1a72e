"""
Iso-contour extraction (marching squares) with exclusion-disk clipping.

Contours are emitted as independent two-point fragments, one per accepted
crossing pair in a cell; fragments are not stitched into polylines. Saddle
cells (four crossings) connect every pair of valid crossings, so the saddle
ambiguity is left unresolved. No contour point lies within
``EXCLUSION_RADIUS`` of an elevation point, and no fragment passes through
such a disk.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .constants import EXCLUSION_RADIUS
from .scalar_field import elevation_grid
from .settings import TopographySettings
from .sources import ElevationPoint

Point = Tuple[float, float]


@dataclass
class ContourLine:
    elevation: float
    points: List[Point] = field(default_factory=list)
    closed: bool = False


@dataclass
class ContourGrid:
    """Elevation samples shared by every contour level of one extraction."""

    xs: np.ndarray
    ys: np.ndarray
    values: np.ndarray
    step: int
    excluded_cells: np.ndarray


# ---------------------------------------------------------------------------
# Exclusion geometry
# ---------------------------------------------------------------------------


def is_excluded(x: float, y: float, sources: Sequence[ElevationPoint], radius: float = EXCLUSION_RADIUS) -> bool:
    """True when ``(x, y)`` lies strictly inside any source's exclusion disk."""
    for src in sources:
        if math.hypot(x - src.x, y - src.y) < radius:
            return True
    return False


def point_segment_distance(px: float, py: float, a: Point, b: Point) -> float:
    ax, ay = a
    bx, by = b
    ex = bx - ax
    ey = by - ay
    len_sq = ex * ex + ey * ey
    if len_sq == 0.0:
        return math.hypot(px - ax, py - ay)
    param = ((px - ax) * ex + (py - ay) * ey) / len_sq
    param = min(1.0, max(0.0, param))
    return math.hypot(px - (ax + param * ex), py - (ay + param * ey))


def segment_hits_exclusion(
    a: Point,
    b: Point,
    sources: Sequence[ElevationPoint],
    radius: float = EXCLUSION_RADIUS,
) -> bool:
    """True when segment ``a-b`` comes closer than ``radius`` to any source."""
    return any(point_segment_distance(src.x, src.y, a, b) < radius for src in sources)


# ---------------------------------------------------------------------------
# Grid sampling
# ---------------------------------------------------------------------------


def grid_step(settings: TopographySettings) -> int:
    return max(2, int(math.floor(20 / settings.resolution)))


def contour_levels(settings: TopographySettings) -> List[float]:
    """``min_elevation + i * contour_interval`` for every level up to ``max_elevation``."""
    n_levels = int(math.floor((settings.max_elevation - settings.min_elevation) / settings.contour_interval))
    return [settings.min_elevation + i * settings.contour_interval for i in range(n_levels + 1)]


def sample_contour_grid(
    sources: Sequence[ElevationPoint],
    settings: TopographySettings,
    width: float,
    height: float,
    radius: float = EXCLUSION_RADIUS,
) -> ContourGrid:
    """Sample the scalar field on the contour grid and flag excluded cells."""
    step = grid_step(settings)
    cols = int(math.floor(width / step))
    rows = int(math.floor(height / step))
    xs = np.arange(cols, dtype=np.float64) * step
    ys = np.arange(rows, dtype=np.float64) * step
    values = elevation_grid(xs, ys, sources, settings)

    cx, cy = np.meshgrid(xs[:-1] + step / 2.0, ys[:-1] + step / 2.0, indexing="xy")
    excluded = np.zeros(cx.shape, dtype=bool)
    for src in sources:
        excluded |= np.hypot(cx - src.x, cy - src.y) < radius

    return ContourGrid(xs=xs, ys=ys, values=values, step=step, excluded_cells=excluded)


def _straddles(a: np.ndarray, b: np.ndarray, level: float) -> np.ndarray:
    return ((a <= level) & (b > level)) | ((a > level) & (b <= level))


def _crossing(level: float, v0: float, v1: float) -> float:
    return (level - v0) / (v1 - v0)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extract_level(
    level: float,
    sources: Sequence[ElevationPoint],
    settings: TopographySettings,
    width: float,
    height: float,
    grid: Optional[ContourGrid] = None,
    radius: float = EXCLUSION_RADIUS,
) -> List[ContourLine]:
    """
    Contour fragments at a single elevation ``level``.

    Parameters
    ----------
    level : float
        Target iso-value.
    sources : sequence of ElevationPoint
        Elevation sources; also the centres of the exclusion disks.
    settings : TopographySettings
        Field and grid-resolution settings.
    width, height : float
        Raster size.
    grid : ContourGrid, optional
        Pre-sampled grid to reuse across levels.
    radius : float
        Exclusion radius around every source.

    Returns
    -------
    list of ContourLine
        Two-point, open fragments in row-major cell order.
    """
    if grid is None:
        grid = sample_contour_grid(sources, settings, width, height, radius)
    v = grid.values
    if v.shape[0] < 2 or v.shape[1] < 2:
        return []

    tl, tr = v[:-1, :-1], v[:-1, 1:]
    bl, br = v[1:, :-1], v[1:, 1:]
    top = _straddles(tl, tr, level)
    right = _straddles(tr, br, level)
    bottom = _straddles(bl, br, level)
    left = _straddles(tl, bl, level)
    n_crossings = top.astype(int) + right + bottom + left

    step = grid.step
    lines: List[ContourLine] = []
    for row, col in np.argwhere((n_crossings >= 2) & ~grid.excluded_cells):
        x = float(grid.xs[col])
        y = float(grid.ys[row])
        a, b, c, d = v[row, col], v[row, col + 1], v[row + 1, col], v[row + 1, col + 1]

        # edges in the order top, right, bottom, left
        crossings: List[Point] = []
        if top[row, col]:
            crossings.append((x + _crossing(level, a, b) * step, y))
        if right[row, col]:
            crossings.append((x + step, y + _crossing(level, b, d) * step))
        if bottom[row, col]:
            crossings.append((x + _crossing(level, c, d) * step, y + step))
        if left[row, col]:
            crossings.append((x, y + _crossing(level, a, c) * step))

        valid = [(float(px), float(py)) for px, py in crossings if not is_excluded(px, py, sources, radius)]
        for start, end in combinations(valid, 2):
            if not segment_hits_exclusion(start, end, sources, radius):
                lines.append(ContourLine(elevation=level, points=[start, end]))
    return lines


def extract_contours(
    sources: Sequence[ElevationPoint],
    settings: TopographySettings,
    width: float,
    height: float,
    radius: float = EXCLUSION_RADIUS,
) -> List[ContourLine]:
    """Contour fragments for every level of :func:`contour_levels`, sampling the field once."""
    grid = sample_contour_grid(sources, settings, width, height, radius)
    lines: List[ContourLine] = []
    for level in contour_levels(settings):
        lines.extend(extract_level(level, sources, settings, width, height, grid=grid, radius=radius))
    return lines


def group_by_level(lines: Sequence[ContourLine]) -> Dict[float, List[ContourLine]]:
    grouped: Dict[float, List[ContourLine]] = {}
    for line in lines:
        grouped.setdefault(line.elevation, []).append(line)
    return grouped


__all__ = [
    "ContourLine",
    "ContourGrid",
    "is_excluded",
    "point_segment_distance",
    "segment_hits_exclusion",
    "grid_step",
    "contour_levels",
    "sample_contour_grid",
    "extract_level",
    "extract_contours",
    "group_by_level",
]
