"""
Concentric field lines around poles for the circular-field visualization.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import List, Sequence, Tuple

import numpy as np

from .settings import CircularFieldSettings
from .sources import Pole

Point = Tuple[float, float]


@dataclass
class CircularFieldLine:
    points: List[Point] = field(default_factory=list)
    radius: float = 0.0
    center_x: float = 0.0
    center_y: float = 0.0
    pole_id: str = ""
    intensity: float = 0.0


def _ring(cx: float, cy: float, radius: float, n_points: int) -> np.ndarray:
    angles = np.linspace(0.0, 2.0 * np.pi, n_points + 1)
    return np.stack([cx + radius * np.cos(angles), cy + radius * np.sin(angles)], axis=1)


def _as_points(arr: np.ndarray) -> List[Point]:
    return [(float(px), float(py)) for px, py in arr]


def circular_field_lines(
    poles: Sequence[Pole],
    settings: CircularFieldSettings,
    width: float,
    height: float,
) -> List[CircularFieldLine]:
    """Undeformed rings at multiples of ``line_spacing`` around every pole."""
    max_radius = max(width, height)
    lines: List[CircularFieldLine] = []
    for pole in poles:
        for i in range(1, settings.line_count + 1):
            radius = i * settings.line_spacing
            if radius > max_radius:
                break
            n_points = max(32, int(math.floor(radius * 0.5)))
            lines.append(
                CircularFieldLine(
                    points=_as_points(_ring(pole.x, pole.y, radius, n_points)),
                    radius=radius,
                    center_x=pole.x,
                    center_y=pole.y,
                    pole_id=pole.id,
                    intensity=abs(pole.strength) / radius,
                )
            )
    return lines


def interactive_field_lines(
    poles: Sequence[Pole],
    settings: CircularFieldSettings,
    width: float,
    height: float,
) -> List[CircularFieldLine]:
    """
    Rings deformed by the other poles.

    Stronger poles get more, tighter rings. Every ring point is displaced
    radially away from each other pole by ``10 * strength / d**2``: outward for
    like polarity, inward for opposite polarity. Rings whose mean radius
    reaches the canvas extent are dropped.
    """
    if not poles:
        return []

    extent = max(width, height)
    lines: List[CircularFieldLine] = []
    for pole in poles:
        strength_factor = max(0.5, min(3.0, pole.strength / 5.0))
        spacing_factor = max(0.5, min(2.0, 10.0 / pole.strength)) if pole.strength else 2.0
        n_lines = int(math.floor(settings.line_count * strength_factor))

        for i in range(1, n_lines + 1):
            radius = i * settings.line_spacing * spacing_factor
            ring = _ring(pole.x, pole.y, radius, max(64, int(math.floor(radius * 0.3))))

            for other in poles:
                if other.id == pole.id:
                    continue
                dx = ring[:, 0] - other.x
                dy = ring[:, 1] - other.y
                distance = np.hypot(dx, dy)
                safe = np.where(distance > 0, distance, 1.0)
                influence = np.where(distance > 0, other.strength * 10.0 / safe**2, 0.0)
                polarity = 1.0 if pole.is_positive == other.is_positive else -1.0
                ring[:, 0] += dx / safe * influence * polarity
                ring[:, 1] += dy / safe * influence * polarity

            mean_radius = float(np.mean(np.hypot(ring[:, 0] - pole.x, ring[:, 1] - pole.y)))
            if mean_radius < extent:
                lines.append(
                    CircularFieldLine(
                        points=_as_points(ring),
                        radius=radius,
                        center_x=pole.x,
                        center_y=pole.y,
                        pole_id=pole.id,
                        intensity=abs(pole.strength) / radius,
                    )
                )
    return lines


def animate_field_lines(lines: Sequence[CircularFieldLine], time: float, speed: float) -> List[CircularFieldLine]:
    """Rotate ring points about their centre; inner points turn faster."""
    rotation = time * speed * 0.001
    animated: List[CircularFieldLine] = []
    for line in lines:
        pts = np.asarray(line.points, dtype=np.float64).reshape(-1, 2)
        dx = pts[:, 0] - line.center_x
        dy = pts[:, 1] - line.center_y
        distance = np.hypot(dx, dy)
        angle = np.arctan2(dy, dx) + rotation / (1.0 + distance * 0.01)
        rotated = np.stack([line.center_x + distance * np.cos(angle), line.center_y + distance * np.sin(angle)], axis=1)
        animated.append(replace(line, points=_as_points(rotated)))
    return animated


def visible_field_lines(
    lines: Sequence[CircularFieldLine],
    width: float,
    height: float,
    margin: float = 50.0,
) -> List[CircularFieldLine]:
    """Keep rings whose bounding box touches the canvas (plus ``margin``)."""
    return [
        line
        for line in lines
        if line.center_x + line.radius >= -margin
        and line.center_x - line.radius <= width + margin
        and line.center_y + line.radius >= -margin
        and line.center_y - line.radius <= height + margin
    ]


__all__ = [
    "CircularFieldLine",
    "circular_field_lines",
    "interactive_field_lines",
    "animate_field_lines",
    "visible_field_lines",
]
