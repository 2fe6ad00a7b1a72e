"""
Topographic scalar field: weighted elevation interpolation plus micro-relief.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from .constants import MIN_SOURCE_DISTANCE
from .noise import terrain_noise
from .settings import TopographySettings
from .sources import ElevationPoint
from .vector_field import VectorSample

ArrayLike = Union[float, np.ndarray]

# Radius-falloff multipliers: weight *= 1 + KIND_GAIN * exp(-d / radius)
KIND_GAIN = {"peak": 2.0, "valley": 1.5, "saddle": 0.8}


def _kind_weight(point: ElevationPoint, dx: np.ndarray, dy: np.ndarray, distance: np.ndarray) -> np.ndarray:
    falloff = np.exp(-distance / point.radius)
    if point.kind == "ridge":
        # elongated influence along the ridge axes
        bearing = np.arctan2(dy, dx)
        return 1.0 + falloff * np.abs(np.cos(2.0 * bearing))
    return 1.0 + falloff * KIND_GAIN[point.kind]


def _elevation_kernel(
    x: np.ndarray,
    y: np.ndarray,
    sources: Sequence[ElevationPoint],
    settings: TopographySettings,
) -> np.ndarray:
    shape = np.broadcast(x, y).shape
    if not sources:
        return np.zeros(shape, dtype=np.float64)

    total_weight = np.zeros(shape, dtype=np.float64)
    weighted = np.zeros(shape, dtype=np.float64)
    # NaN marks "no degenerate source yet"; the first one found wins
    pinned = np.full(shape, np.nan, dtype=np.float64)

    for point in sources:
        dx = x - point.x
        dy = y - point.y
        distance = np.hypot(dx, dy)
        near = distance < MIN_SOURCE_DISTANCE
        pinned = np.where(near & np.isnan(pinned), point.elevation, pinned)

        safe = np.where(near, 1.0, distance)
        weight = _kind_weight(point, dx, dy, safe) / safe**2
        weight = np.where(near, 0.0, weight)
        total_weight += weight
        weighted += point.elevation * weight

    base = np.divide(weighted, total_weight, out=np.zeros(shape, dtype=np.float64), where=total_weight > 0)
    value = np.clip(base + terrain_noise(x, y), settings.min_elevation, settings.max_elevation)
    return np.where(np.isnan(pinned), value, pinned)


def evaluate_scalar_field(
    x: float,
    y: float,
    sources: Sequence[ElevationPoint],
    settings: TopographySettings,
    t: float = 0.0,
) -> float:
    """
    Terrain elevation at ``(x, y)``.

    Each elevation point contributes with weight ``1/d**2`` scaled by a
    kind-specific radius falloff; the weighted mean is perturbed by
    :func:`~field_studio.noise.terrain_noise` and clamped to
    ``[min_elevation, max_elevation]``.

    A query within 1 unit of a source returns that source's own elevation.
    With no sources the field is 0. ``t`` is accepted for interface symmetry
    with the vector evaluators and is not used.
    """
    value = _elevation_kernel(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64), sources, settings)
    return float(value)


def elevation_grid(
    xs: np.ndarray,
    ys: np.ndarray,
    sources: Sequence[ElevationPoint],
    settings: TopographySettings,
) -> np.ndarray:
    """Vectorised elevation on the grid ``xs x ys``, shape ``(len(ys), len(xs))``."""
    X, Y = np.meshgrid(np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64), indexing="xy")
    return _elevation_kernel(X, Y, sources, settings)


def evaluate_gradient(
    x: float,
    y: float,
    sources: Sequence[ElevationPoint],
    settings: TopographySettings,
    h: float = 2.0,
) -> VectorSample:
    """Central-difference slope of the terrain, for gradient overlays."""
    east = evaluate_scalar_field(x + h, y, sources, settings)
    west = evaluate_scalar_field(x - h, y, sources, settings)
    north = evaluate_scalar_field(x, y - h, sources, settings)
    south = evaluate_scalar_field(x, y + h, sources, settings)
    return VectorSample.from_components((east - west) / (2 * h), (south - north) / (2 * h))


__all__ = ["KIND_GAIN", "evaluate_scalar_field", "elevation_grid", "evaluate_gradient"]
