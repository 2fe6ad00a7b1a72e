"""
Settings records for every visualization kind.

Modifier records (direction bias, polarity, base flow, ...) are plain
dataclasses. The per-visualization configs at the bottom form a tagged union:
each has a ``kind`` tag and an :class:`AnimationState`, and
:func:`config_for` builds the default config for a tag.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, Type, Union

from .constants import (
    DEFAULT_CURVE_STIFFNESS,
    DEFAULT_DIRECTION_ANGLE,
    DEFAULT_DIRECTION_STRENGTH,
    DEFAULT_GRID_SPACING,
    DEFAULT_LINE_LENGTH,
    DEFAULT_STREAMLINE_STEP_SIZE,
    DEFAULT_STREAMLINE_STEPS,
    DEFAULT_WIND_SPEED,
    DEFAULT_WIND_STRENGTH,
)
from .noise import NoiseConfig


@dataclass
class DirectionSettings:
    """Uniform directional bias seeded into the pole field (``angle`` in degrees)."""

    enabled: bool = True
    angle: float = DEFAULT_DIRECTION_ANGLE
    strength: float = DEFAULT_DIRECTION_STRENGTH


@dataclass
class PolaritySettings:
    """Global polarity mode; ``False`` inverts every pole's sign."""

    attract_to_poles: bool = True


@dataclass
class FlowSettings:
    """Base flow of the turbulence field (``base_angle`` in degrees)."""

    base_velocity: float = 0.5
    base_angle: float = 0.0
    enabled: bool = True


@dataclass
class TopographySettings:
    """
    Terrain and contouring parameters.

    ``resolution`` controls the sampling step of the contour grid:
    ``step = max(2, floor(20 / resolution))``. ``smoothing`` is carried for
    presentation layers and not used by the extractor.
    """

    contour_interval: float = 50.0
    min_elevation: float = 0.0
    max_elevation: float = 1000.0
    smoothing: float = 0.3
    resolution: float = 1.0


@dataclass
class GridSettings:
    spacing: float = DEFAULT_GRID_SPACING
    line_length: float = DEFAULT_LINE_LENGTH
    layout: str = "rectangular"
    curve_stiffness: float = DEFAULT_CURVE_STIFFNESS

    LAYOUTS: ClassVar[tuple] = ("rectangular", "triangular")

    def __post_init__(self) -> None:
        if self.layout not in self.LAYOUTS:
            raise ValueError("layout must be 'rectangular' or 'triangular'")


@dataclass
class CircularFieldSettings:
    line_count: int = 8
    line_spacing: float = 30.0
    line_weight: float = 1.0
    opacity: float = 0.8
    animation_speed: float = 1.0


@dataclass
class StreamlineSettings:
    line_count: int = 2000
    steps: int = DEFAULT_STREAMLINE_STEPS
    step_size: float = DEFAULT_STREAMLINE_STEP_SIZE


@dataclass
class AnimationState:
    """Trait shared by every visualization config."""

    time: float = 0.0
    is_animating: bool = True


# ---------------------------------------------------------------------------
# Per-visualization configs (tagged union)
# ---------------------------------------------------------------------------


@dataclass
class GridFieldConfig:
    kind: ClassVar[str] = "grid"

    grid: GridSettings = field(default_factory=GridSettings)
    direction: DirectionSettings = field(default_factory=DirectionSettings)
    polarity: PolaritySettings = field(default_factory=PolaritySettings)
    wind_strength: float = DEFAULT_WIND_STRENGTH
    wind_speed: float = DEFAULT_WIND_SPEED
    animation: AnimationState = field(default_factory=AnimationState)


@dataclass
class FlowFieldConfig:
    kind: ClassVar[str] = "flow"

    particle_count: int = 100
    particle_speed: float = 2.0
    particle_life: int = 100
    flow_intensity: float = 1.0
    polarity: PolaritySettings = field(default_factory=PolaritySettings)
    animation: AnimationState = field(default_factory=AnimationState)


@dataclass
class TurbulenceFieldConfig:
    kind: ClassVar[str] = "turbulence"

    noise: NoiseConfig = field(default_factory=NoiseConfig)
    flow: FlowSettings = field(default_factory=FlowSettings)
    streamlines: StreamlineSettings = field(default_factory=StreamlineSettings)
    speed: float = 1.0
    intensity: float = 1.0
    animation: AnimationState = field(default_factory=AnimationState)


@dataclass
class TopographyConfig:
    kind: ClassVar[str] = "topography"

    topography: TopographySettings = field(default_factory=TopographySettings)
    animation: AnimationState = field(default_factory=AnimationState)


@dataclass
class CircularFieldConfig:
    kind: ClassVar[str] = "circular"

    circular: CircularFieldSettings = field(default_factory=CircularFieldSettings)
    interactive: bool = True
    animation: AnimationState = field(default_factory=AnimationState)


VisualizationConfig = Union[
    GridFieldConfig, FlowFieldConfig, TurbulenceFieldConfig, TopographyConfig, CircularFieldConfig
]

CONFIG_TYPES: Dict[str, Type] = {
    cls.kind: cls
    for cls in (GridFieldConfig, FlowFieldConfig, TurbulenceFieldConfig, TopographyConfig, CircularFieldConfig)
}


def config_for(kind: str) -> VisualizationConfig:
    """Default config for the visualization tagged ``kind``."""
    try:
        return CONFIG_TYPES[kind]()
    except KeyError:
        raise ValueError(f"unknown visualization kind {kind!r}; expected one of {sorted(CONFIG_TYPES)}") from None


__all__ = [
    "DirectionSettings",
    "PolaritySettings",
    "FlowSettings",
    "TopographySettings",
    "GridSettings",
    "CircularFieldSettings",
    "StreamlineSettings",
    "AnimationState",
    "GridFieldConfig",
    "FlowFieldConfig",
    "TurbulenceFieldConfig",
    "TopographyConfig",
    "CircularFieldConfig",
    "VisualizationConfig",
    "CONFIG_TYPES",
    "config_for",
]
