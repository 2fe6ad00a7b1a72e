"""
Deterministic pseudo-noise used by the turbulence and topography fields.

This is a stylised trigonometric substitute for Perlin noise: cheap, smooth,
stateless and fully reproducible for a given :class:`NoiseConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

ArrayLike = Union[float, np.ndarray]


@dataclass(frozen=True)
class NoiseConfig:
    """
    Multi-octave noise parameters, fixed for a visualization session.

    Parameters
    ----------
    scale : float
        Base sampling frequency of the first octave.
    octaves : int
        Number of summed octaves. Zero yields an identically-zero field.
    persistence : float
        Amplitude multiplier applied after each octave.
    lacunarity : float
        Frequency multiplier applied after each octave.
    seed : float
        Offset added to both sample coordinates.
    """

    scale: float = 0.01
    octaves: int = 4
    persistence: float = 0.5
    lacunarity: float = 2.0
    seed: float = 0.0


def _noise_basis(sx: ArrayLike, sy: ArrayLike) -> ArrayLike:
    return np.sin(sx * 0.1) * np.cos(sy * 0.1) * np.sin(sx * 0.05 + sy * 0.05)


def synthesize_noise(x: ArrayLike, y: ArrayLike, config: NoiseConfig) -> ArrayLike:
    """
    Sum ``config.octaves`` octaves of the trig noise basis at ``(x, y)``.

    Scalars in give a float out; arrays broadcast and give an ndarray.
    """
    scalar_input = np.isscalar(x) and np.isscalar(y)
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    value = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
    amplitude = 1.0
    frequency = config.scale
    for _ in range(int(config.octaves)):
        value = value + amplitude * _noise_basis(x * frequency + config.seed, y * frequency + config.seed)
        amplitude *= config.persistence
        frequency *= config.lacunarity

    return float(value) if scalar_input else value


def terrain_noise(x: ArrayLike, y: ArrayLike, scale: float = 0.01, amplitude: float = 10.0) -> ArrayLike:
    """Low-amplitude micro-relief added on top of interpolated elevation."""
    return (
        np.sin(x * scale)
        * np.cos(y * scale)
        * np.sin(x * scale * 1.7 + y * scale * 1.3)
        * amplitude
    )


__all__ = ["NoiseConfig", "synthesize_noise", "terrain_noise"]
