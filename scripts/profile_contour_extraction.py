#!/usr/bin/env python3
"""
Standalone runtime profile for contour extraction.

Times terrain sampling and per-level marching squares on the default canvas
at a few grid resolutions.
"""

import sys
import time
from pathlib import Path

import numpy as np

# Ensure project root is importable when invoked as a script.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from field_studio import ElevationPoint, TopographySettings, contour_levels, extract_level
from field_studio.contours import sample_contour_grid


def main() -> None:
    rng = np.random.default_rng(42)
    kinds = ("peak", "valley", "saddle", "ridge")
    sources = [
        ElevationPoint(
            id=f"e{i}",
            x=float(rng.uniform(0, 1200)),
            y=float(rng.uniform(0, 800)),
            elevation=float(rng.uniform(0, 1000)),
            kind=kinds[i % len(kinds)],
            radius=float(rng.uniform(80, 200)),
        )
        for i in range(12)
    ]

    for resolution in (0.5, 1.0, 2.0, 4.0):
        settings = TopographySettings(resolution=resolution)

        start = time.perf_counter()
        grid = sample_contour_grid(sources, settings, 1200.0, 800.0)
        t_grid = time.perf_counter() - start

        start = time.perf_counter()
        n_segments = 0
        for level in contour_levels(settings):
            n_segments += len(extract_level(level, sources, settings, 1200.0, 800.0, grid=grid))
        t_levels = time.perf_counter() - start

        print(
            f"resolution={resolution:<4g} grid={grid.values.shape} "
            f"sample={t_grid * 1e3:7.2f} ms  extract={t_levels * 1e3:8.2f} ms  segments={n_segments}"
        )


if __name__ == "__main__":
    main()
