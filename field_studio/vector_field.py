"""
Vector field evaluators: superposed poles (grid/flow fields) and turbulence.

Both evaluators are pure functions of ``(position, sources, settings, time)``.
Per-source contributions are linear and summed in source order, so the field
of a union of source sets is the sum of the individual fields (apart from the
bias, base-flow, wind and noise terms, which do not depend on sources).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

import numpy as np

from .constants import (
    DISTANCE_OFFSET,
    MIN_SOURCE_DISTANCE,
    POLE_FORCE_MULTIPLIER,
    QUANTUM_WAVENUMBER,
    WIND_MULTIPLIER,
    WIND_WAVE_FREQUENCIES,
)
from .noise import NoiseConfig, synthesize_noise
from .settings import DirectionSettings, FlowSettings, GridSettings, PolaritySettings
from .sources import Pole, TurbulenceSource


@dataclass(frozen=True)
class VectorSample:
    """Field value at a single query point."""

    field_x: float
    field_y: float
    magnitude: float
    angle: float

    @classmethod
    def from_components(cls, field_x: float, field_y: float) -> "VectorSample":
        return cls(
            field_x=float(field_x),
            field_y=float(field_y),
            magnitude=math.hypot(field_x, field_y),
            angle=math.atan2(field_y, field_x),
        )


FieldFunction = Callable[[float, float], VectorSample]


# ---------------------------------------------------------------------------
# Perturbations
# ---------------------------------------------------------------------------


def wind_effect(x: float, y: float, time: float, wind_strength: float) -> Tuple[float, float]:
    """Two travelling cosine/sine waves per axis, scaled by ``wind_strength``."""
    p = WIND_WAVE_FREQUENCIES["primary"]
    s = WIND_WAVE_FREQUENCIES["secondary"]
    t3 = WIND_WAVE_FREQUENCIES["tertiary"]
    q = WIND_WAVE_FREQUENCIES["quaternary"]
    scale = wind_strength * WIND_MULTIPLIER

    wind_x = (
        math.cos(time * p["time"] + x * p["x"] + y * p["y"]) * p["amplitude"]
        + math.cos(time * s["time"] + x * s["x"] - y * s["y"]) * s["amplitude"]
    ) * scale
    wind_y = (
        math.sin(time * t3["time"] + x * t3["x"] + y * t3["y"]) * t3["amplitude"]
        + math.sin(time * q["time"] + y * q["x"] - x * q["y"]) * q["amplitude"]
    ) * scale
    return wind_x, wind_y


def turbulence_swirl(x: float, y: float, time: float) -> Tuple[float, float]:
    """Time-varying large-scale swirl layered over the turbulence field."""
    tx = math.sin(time * 0.3 + x * 0.01 + y * 0.008) * 0.3 + math.cos(time * 0.7 + x * 0.005 - y * 0.012) * 0.2
    ty = math.cos(time * 0.4 + y * 0.01 + x * 0.009) * 0.3 + math.sin(time * 0.6 - x * 0.007 + y * 0.011) * 0.2
    return tx, ty


# ---------------------------------------------------------------------------
# Pole (multipole) field
# ---------------------------------------------------------------------------


def polarity_sign(pole: Pole, polarity: PolaritySettings) -> float:
    """+1 when the pole is effectively attractive, -1 when repulsive."""
    return 1.0 if polarity.attract_to_poles == pole.is_positive else -1.0


def pole_contribution(x: float, y: float, pole: Pole, polarity: PolaritySettings) -> Tuple[float, float]:
    """
    Field contribution of a single pole at ``(x, y)``.

    ``(ux, uy)`` is the unit vector from the query point toward the pole.
    Poles within ``MIN_SOURCE_DISTANCE`` contribute nothing.
    """
    dx = pole.x - x
    dy = pole.y - y
    distance = math.hypot(dx, dy)
    if distance <= MIN_SOURCE_DISTANCE:
        return 0.0, 0.0

    ux = dx / distance
    uy = dy / distance
    sign = polarity_sign(pole, polarity)

    if pole.kind == "quantum":
        envelope = math.exp(-distance / pole.radius) * math.sin(pole.phase + distance * QUANTUM_WAVENUMBER)
        magnitude = sign * pole.strength * POLE_FORCE_MULTIPLIER * envelope
        return ux * magnitude, uy * magnitude

    force = sign * (pole.strength * POLE_FORCE_MULTIPLIER) / (distance * DISTANCE_OFFSET + 1.0)
    if pole.kind == "attractor":
        return ux * force, uy * force
    if pole.kind == "repeller":
        return -ux * force, -uy * force
    # vortex: radial direction rotated by +90 degrees
    return -uy * force, ux * force


def evaluate_vector_field(
    x: float,
    y: float,
    sources: Sequence[Pole],
    direction: DirectionSettings | None = None,
    polarity: PolaritySettings | None = None,
    t: float = 0.0,
    wind_strength: float = 0.0,
    flow_intensity: float = 1.0,
) -> VectorSample:
    """
    Superposed pole field with directional bias and wind perturbation.

    Parameters
    ----------
    x, y : float
        Query point.
    sources : sequence of Pole
        Poles to superpose; empty gives just the bias (+ wind).
    direction : DirectionSettings, optional
        Uniform bias ``(cos a, sin a) * strength`` when enabled (``a`` in degrees).
    polarity : PolaritySettings, optional
        Global attract/repel mode, composed with each pole's sign.
    t : float
        Animation time driving the wind waves.
    wind_strength : float
        Wind amplitude; zero disables the perturbation.
    flow_intensity : float
        Global multiplier applied to the final vector.

    Returns
    -------
    VectorSample
    """
    direction = direction or DirectionSettings(enabled=False)
    polarity = polarity or PolaritySettings()

    field_x = 0.0
    field_y = 0.0
    if direction.enabled:
        angle = math.radians(direction.angle)
        field_x = math.cos(angle) * direction.strength
        field_y = math.sin(angle) * direction.strength

    for pole in sources:
        cx, cy = pole_contribution(x, y, pole, polarity)
        field_x += cx
        field_y += cy

    if wind_strength:
        wx, wy = wind_effect(x, y, t, wind_strength)
        field_x += wx
        field_y += wy

    return VectorSample.from_components(field_x * flow_intensity, field_y * flow_intensity)


# ---------------------------------------------------------------------------
# Turbulence field
# ---------------------------------------------------------------------------


def turbulence_contribution(x: float, y: float, source: TurbulenceSource) -> Tuple[float, float]:
    """Contribution of one turbulence emitter; ``(rx, ry)`` points away from it."""
    dx = x - source.x
    dy = y - source.y
    distance = math.hypot(dx, dy)
    if distance <= MIN_SOURCE_DISTANCE:
        return 0.0, 0.0

    influence = source.strength / (1.0 + distance * 0.01)
    rx = dx / distance
    ry = dy / distance
    if source.kind == "vortex":
        return -ry * influence * 0.1, rx * influence * 0.1
    if source.kind == "source":
        return rx * influence * 0.05, ry * influence * 0.05
    if source.kind == "sink":
        return -rx * influence * 0.05, -ry * influence * 0.05
    angle = math.radians(source.angle)
    return math.cos(angle) * influence * 0.02, math.sin(angle) * influence * 0.02


def evaluate_turbulence_field(
    x: float,
    y: float,
    sources: Sequence[TurbulenceSource],
    noise: NoiseConfig,
    flow: FlowSettings,
    t: float = 0.0,
    perturbation: float = 1.0,
) -> VectorSample:
    """
    Turbulent flow at ``(x, y)``: base flow, emitters, noise drift and swirl.

    ``perturbation`` scales the time-varying swirl; set it (and
    ``noise.octaves``) to zero for a purely source-driven field.
    """
    field_x = 0.0
    field_y = 0.0
    if flow.enabled:
        angle = math.radians(flow.base_angle)
        field_x += math.cos(angle) * flow.base_velocity
        field_y += math.sin(angle) * flow.base_velocity

    for source in sources:
        cx, cy = turbulence_contribution(x, y, source)
        field_x += cx
        field_y += cy

    field_x += synthesize_noise(x + t * 0.5, y, noise) * 0.5
    field_y += synthesize_noise(x, y + t * 0.5, noise) * 0.5

    if perturbation:
        sx, sy = turbulence_swirl(x, y, t)
        field_x += sx * perturbation
        field_y += sy * perturbation

    return VectorSample.from_components(field_x, field_y)


# ---------------------------------------------------------------------------
# Grid sampling
# ---------------------------------------------------------------------------


@dataclass
class GridLine:
    """Cubic Bezier glyph drawn at one grid point of the grid-field view."""

    x: float
    y: float
    angle: float
    length: float
    start: Tuple[float, float]
    control1: Tuple[float, float]
    control2: Tuple[float, float]
    end: Tuple[float, float]


def grid_points(width: float, height: float, spacing: float, layout: str = "rectangular") -> np.ndarray:
    """
    Sample positions starting at ``spacing / 2``, shape ``(n, 2)``.

    The triangular layout shifts every other row by half a spacing.
    """
    if layout not in GridSettings.LAYOUTS:
        raise ValueError("layout must be 'rectangular' or 'triangular'")
    xs = np.arange(spacing / 2.0, width, spacing)
    ys = np.arange(spacing / 2.0, height, spacing)
    points: List[Tuple[float, float]] = []
    for row, y in enumerate(ys):
        offset = spacing / 2.0 if (layout == "triangular" and row % 2) else 0.0
        for x in xs + offset:
            if x < width:
                points.append((float(x), float(y)))
    return np.array(points, dtype=np.float64).reshape(-1, 2)


def sample_vector_grid(
    width: float,
    height: float,
    spacing: float,
    field_fn: FieldFunction,
    layout: str = "rectangular",
) -> Tuple[np.ndarray, List[VectorSample]]:
    """Evaluate ``field_fn`` on a regular grid; returns ``(points, samples)``."""
    points = grid_points(width, height, spacing, layout)
    samples = [field_fn(float(px), float(py)) for px, py in points]
    return points, samples


def build_grid_lines(
    width: float,
    height: float,
    settings: GridSettings,
    field_fn: FieldFunction,
    zoom: float = 1.0,
) -> List[GridLine]:
    """
    Bezier glyphs aligned with the field, one per grid point.

    The first control point follows the field angle at the start, the second
    the field angle at the end point, pulled in by ``curve_stiffness``.
    """
    spacing = settings.spacing * zoom
    length = settings.line_length * zoom
    control_distance = length * 0.3 * settings.curve_stiffness

    lines: List[GridLine] = []
    for px, py in grid_points(width, height, spacing, settings.layout):
        start = field_fn(px, py)
        end_x = px + math.cos(start.angle) * length
        end_y = py + math.sin(start.angle) * length
        end = field_fn(end_x, end_y)
        lines.append(
            GridLine(
                x=float(px),
                y=float(py),
                angle=start.angle,
                length=length,
                start=(float(px), float(py)),
                control1=(px + math.cos(start.angle) * control_distance, py + math.sin(start.angle) * control_distance),
                control2=(end_x - math.cos(end.angle) * control_distance, end_y - math.sin(end.angle) * control_distance),
                end=(end_x, end_y),
            )
        )
    return lines


__all__ = [
    "VectorSample",
    "FieldFunction",
    "GridLine",
    "wind_effect",
    "turbulence_swirl",
    "polarity_sign",
    "pole_contribution",
    "evaluate_vector_field",
    "turbulence_contribution",
    "evaluate_turbulence_field",
    "grid_points",
    "sample_vector_grid",
    "build_grid_lines",
]
