"""
Fixed-step Euler streamline integration through any vector field.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import partial
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import DEFAULT_CANVAS_HEIGHT, DEFAULT_CANVAS_WIDTH, MIN_STREAMLINE_MAGNITUDE
from .noise import NoiseConfig
from .settings import FlowSettings
from .sources import TurbulenceSource
from .vector_field import FieldFunction, evaluate_turbulence_field

Point = Tuple[float, float]


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned canvas rectangle; edges count as inside."""

    xmin: float = 0.0
    ymin: float = 0.0
    xmax: float = DEFAULT_CANVAS_WIDTH
    ymax: float = DEFAULT_CANVAS_HEIGHT

    def contains(self, x: float, y: float) -> bool:
        return self.xmin <= x <= self.xmax and self.ymin <= y <= self.ymax

    @classmethod
    def canvas(cls, width: float, height: float) -> "Bounds":
        return cls(0.0, 0.0, float(width), float(height))


def trace(
    seed_x: float,
    seed_y: float,
    field_fn: FieldFunction,
    steps: int,
    step_size: float,
    bounds: Bounds = Bounds(),
    min_magnitude: float = MIN_STREAMLINE_MAGNITUDE,
) -> List[Point]:
    """
    Walk ``field_fn`` from the seed with normalised Euler steps.

    At most ``steps`` points are recorded. Integration stops early when the
    field magnitude drops to ``min_magnitude`` or below, or when the next
    position leaves ``bounds`` (that position is not recorded).
    """
    points: List[Point] = []
    x = float(seed_x)
    y = float(seed_y)
    for _ in range(int(steps)):
        points.append((x, y))
        sample = field_fn(x, y)
        if sample.magnitude <= min_magnitude:
            break
        x += sample.field_x / sample.magnitude * step_size
        y += sample.field_y / sample.magnitude * step_size
        if not bounds.contains(x, y):
            break
    return points


def integrate_streamline(
    seed_x: float,
    seed_y: float,
    sources: Sequence[TurbulenceSource],
    noise: NoiseConfig,
    flow: FlowSettings,
    t: float = 0.0,
    steps: int = 50,
    step_size: float = 2.0,
    bounds: Bounds = Bounds(),
    perturbation: float = 1.0,
) -> List[Point]:
    """Streamline through the turbulence field at time ``t``."""
    field_fn = partial(
        evaluate_turbulence_field,
        sources=sources,
        noise=noise,
        flow=flow,
        t=t,
        perturbation=perturbation,
    )
    return trace(seed_x, seed_y, field_fn, steps, step_size, bounds)


def seed_grid(
    width: float,
    height: float,
    count: int,
    jitter: float = 0.0,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    Roughly uniform seed lattice of ``count`` points, shape ``(count, 2)``.

    Columns are spaced by about ``sqrt(width * height / count)``; rows are
    stretched so the whole lattice stays inside ``[0, width) x [0, height)``.
    With ``jitter > 0`` each seed moves by up to ``jitter`` cell sizes.
    """
    if count <= 0:
        return np.empty((0, 2), dtype=np.float64)
    spacing = math.sqrt((width * height) / count)
    cols = max(1, int(round(width / spacing)))
    rows = int(math.ceil(count / cols))
    dx = width / cols
    dy = height / rows
    idx = np.arange(count)
    seeds = np.stack([(idx % cols) * dx, (idx // cols) * dy], axis=1).astype(np.float64)
    if jitter > 0:
        rng = rng or np.random.default_rng()
        seeds += rng.uniform(0.0, jitter, size=seeds.shape) * np.array([dx, dy])
    return seeds


__all__ = ["Bounds", "trace", "integrate_streamline", "seed_grid"]
