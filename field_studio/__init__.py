"""
Point-source field toolkit: vector, scalar and turbulence fields with contour
extraction, streamline integration and matplotlib/SVG rendering.
"""

from .api import FieldStudioAPI
from .sources import Pole, ElevationPoint, TurbulenceSource, SourceRegistry, generate_source_id
from .noise import NoiseConfig, synthesize_noise, terrain_noise
from .settings import (
    DirectionSettings,
    PolaritySettings,
    FlowSettings,
    TopographySettings,
    GridSettings,
    CircularFieldSettings,
    StreamlineSettings,
    AnimationState,
    GridFieldConfig,
    FlowFieldConfig,
    TurbulenceFieldConfig,
    TopographyConfig,
    CircularFieldConfig,
    config_for,
)
from .clock import AnimationClock
from .vector_field import VectorSample, GridLine, evaluate_vector_field, evaluate_turbulence_field, build_grid_lines
from .scalar_field import evaluate_scalar_field, elevation_grid, evaluate_gradient
from .contours import ContourLine, contour_levels, extract_level, extract_contours
from .streamlines import Bounds, trace, integrate_streamline, seed_grid
from .circular import CircularFieldLine, circular_field_lines, interactive_field_lines, animate_field_lines
from .particles import ParticleSystem
from .rendering import RenderStyle, renderer_for

__all__ = [
    "FieldStudioAPI",
    "Pole",
    "ElevationPoint",
    "TurbulenceSource",
    "SourceRegistry",
    "generate_source_id",
    "NoiseConfig",
    "synthesize_noise",
    "terrain_noise",
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
    "config_for",
    "AnimationClock",
    "VectorSample",
    "GridLine",
    "evaluate_vector_field",
    "evaluate_turbulence_field",
    "build_grid_lines",
    "evaluate_scalar_field",
    "elevation_grid",
    "evaluate_gradient",
    "ContourLine",
    "contour_levels",
    "extract_level",
    "extract_contours",
    "Bounds",
    "trace",
    "integrate_streamline",
    "seed_grid",
    "CircularFieldLine",
    "circular_field_lines",
    "interactive_field_lines",
    "animate_field_lines",
    "ParticleSystem",
    "RenderStyle",
    "renderer_for",
]
