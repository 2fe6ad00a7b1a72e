"""
Physics and layout constants shared by the field evaluators.
"""

from __future__ import annotations

from typing import Dict

# Pole force law: (strength * POLE_FORCE_MULTIPLIER) / (d * DISTANCE_OFFSET + 1)
POLE_FORCE_MULTIPLIER = 0.01
DISTANCE_OFFSET = 0.1

# Sources closer than this are skipped (vector) or short-circuit (scalar).
MIN_SOURCE_DISTANCE = 1.0

WIND_MULTIPLIER = 0.02
WIND_WAVE_FREQUENCIES: Dict[str, Dict[str, float]] = {
    "primary": {"time": 0.5, "x": 0.003, "y": 0.002, "amplitude": 0.6},
    "secondary": {"time": 0.3, "x": 0.001, "y": -0.001, "amplitude": 0.4},
    "tertiary": {"time": 0.4, "x": 0.002, "y": 0.003, "amplitude": 0.6},
    "quaternary": {"time": 0.6, "x": -0.001, "y": 0.001, "amplitude": 0.4},
}

# Quantum poles: sin(phase + d * QUANTUM_WAVENUMBER)
QUANTUM_WAVENUMBER = 0.05

# Contour geometry is suppressed inside this disk around every elevation point.
EXCLUSION_RADIUS = 20.0

POLE_CLICK_RADIUS = 20.0

# Streamlines stop once the normalised step would be taken on a weaker field.
MIN_STREAMLINE_MAGNITUDE = 0.01

DEFAULT_CANVAS_WIDTH = 1200.0
DEFAULT_CANVAS_HEIGHT = 800.0

FRAME_TIME = 0.016

DEFAULT_POLE_STRENGTH = 25.0
DEFAULT_GRID_SPACING = 30.0
DEFAULT_LINE_LENGTH = 20.0
DEFAULT_CURVE_STIFFNESS = 0.3
DEFAULT_WIND_STRENGTH = 0.3
DEFAULT_WIND_SPEED = 0.3
DEFAULT_DIRECTION_ANGLE = 0.0
DEFAULT_DIRECTION_STRENGTH = 0.005
DEFAULT_STREAMLINE_STEPS = 150
DEFAULT_STREAMLINE_STEP_SIZE = 3.0


__all__ = [
    "POLE_FORCE_MULTIPLIER",
    "DISTANCE_OFFSET",
    "MIN_SOURCE_DISTANCE",
    "WIND_MULTIPLIER",
    "WIND_WAVE_FREQUENCIES",
    "QUANTUM_WAVENUMBER",
    "EXCLUSION_RADIUS",
    "POLE_CLICK_RADIUS",
    "MIN_STREAMLINE_MAGNITUDE",
    "DEFAULT_CANVAS_WIDTH",
    "DEFAULT_CANVAS_HEIGHT",
    "FRAME_TIME",
    "DEFAULT_POLE_STRENGTH",
    "DEFAULT_GRID_SPACING",
    "DEFAULT_LINE_LENGTH",
    "DEFAULT_CURVE_STIFFNESS",
    "DEFAULT_WIND_STRENGTH",
    "DEFAULT_WIND_SPEED",
    "DEFAULT_DIRECTION_ANGLE",
    "DEFAULT_DIRECTION_STRENGTH",
    "DEFAULT_STREAMLINE_STEPS",
    "DEFAULT_STREAMLINE_STEP_SIZE",
]
