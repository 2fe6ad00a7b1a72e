"""
Shared fixtures for the field_studio test-suite.
"""

import itertools

import matplotlib

matplotlib.use("Agg")

import pytest

from field_studio.noise import NoiseConfig
from field_studio.settings import FlowSettings, TopographySettings
from field_studio.sources import ElevationPoint, Pole, TurbulenceSource


@pytest.fixture
def counter_ids():
    """Deterministic id factory: 's0', 's1', ..."""
    counter = itertools.count()
    return lambda: f"s{next(counter)}"


@pytest.fixture
def topography():
    return TopographySettings()


@pytest.fixture
def quiet_noise():
    return NoiseConfig(octaves=0)


@pytest.fixture
def base_flow():
    return FlowSettings(base_velocity=0.5, base_angle=0.0, enabled=True)


@pytest.fixture
def single_peak():
    return [ElevationPoint(id="p1", x=300.0, y=200.0, elevation=800.0, kind="peak", radius=150.0)]


@pytest.fixture
def peak_and_valley():
    return [
        ElevationPoint(id="p1", x=150.0, y=200.0, elevation=900.0, kind="peak", radius=150.0),
        ElevationPoint(id="v1", x=450.0, y=200.0, elevation=100.0, kind="valley", radius=150.0),
    ]


@pytest.fixture
def attractor():
    return Pole(id="a", x=200.0, y=300.0, strength=100.0, is_positive=True, kind="attractor")


@pytest.fixture
def vortex_source():
    return TurbulenceSource(id="t", x=0.0, y=0.0, strength=50.0, kind="vortex")
