"""
High-level API tying source registries, field evaluators and renderers together.
"""

from __future__ import annotations

from dataclasses import replace
from functools import partial
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .circular import (
    CircularFieldLine,
    animate_field_lines,
    circular_field_lines,
    interactive_field_lines,
    visible_field_lines,
)
from .clock import AnimationClock
from .constants import DEFAULT_CANVAS_HEIGHT, DEFAULT_CANVAS_WIDTH, FRAME_TIME
from .contours import ContourLine, contour_levels, extract_level, sample_contour_grid
from .particles import ParticleSystem
from .rendering import RenderStyle, renderer_for
from .scalar_field import evaluate_gradient, evaluate_scalar_field
from .settings import CONFIG_TYPES, VisualizationConfig, config_for
from .sources import ElevationPoint, Pole, SourceRegistry, TurbulenceSource
from .streamlines import Bounds, integrate_streamline, seed_grid
from .vector_field import GridLine, VectorSample, build_grid_lines, evaluate_turbulence_field, evaluate_vector_field

# Source flavour held by each visualization's registry
SOURCE_TYPES: Dict[str, type] = {
    "grid": Pole,
    "flow": Pole,
    "circular": Pole,
    "topography": ElevationPoint,
    "turbulence": TurbulenceSource,
}

Point = Tuple[float, float]
FrameCallback = Callable[[int, "FieldStudioAPI"], None]


class FieldStudioAPI:
    """
    Facade owning the source registries, the visualization configs and one
    animation clock.

    Every visualization owns one homogeneous registry: poles for the grid,
    flow and circular views, elevation points for topography and turbulence
    sources for turbulence. Field queries read the clock time explicitly, so
    the evaluators stay pure.
    """

    def __init__(
        self,
        width: float = DEFAULT_CANVAS_WIDTH,
        height: float = DEFAULT_CANVAS_HEIGHT,
        clock: AnimationClock | None = None,
        seed: int | None = None,
    ):
        self.width = float(width)
        self.height = float(height)
        self.clock = clock or AnimationClock()
        self.seed = seed
        self.registries: Dict[str, SourceRegistry] = {
            kind: SourceRegistry(SOURCE_TYPES[kind]) for kind in CONFIG_TYPES
        }
        self.configs: Dict[str, VisualizationConfig] = {kind: config_for(kind) for kind in CONFIG_TYPES}
        self._particles: Optional[ParticleSystem] = None

    @property
    def bounds(self) -> Bounds:
        return Bounds.canvas(self.width, self.height)

    @property
    def time(self) -> float:
        return self.clock.time

    @property
    def elevation_points(self) -> SourceRegistry[ElevationPoint]:
        return self.registries["topography"]

    @property
    def turbulence_sources(self) -> SourceRegistry[TurbulenceSource]:
        return self.registries["turbulence"]

    # ------------------------------------------------------------------
    # Sources and configs
    # ------------------------------------------------------------------
    def registry(self, kind: str) -> SourceRegistry:
        """Source registry owned by the visualization tagged ``kind``."""
        self.config(kind)
        return self.registries[kind]

    def config(self, kind: str) -> VisualizationConfig:
        if kind not in self.configs:
            raise ValueError(f"unknown visualization kind {kind!r}; expected one of {sorted(self.configs)}")
        return self.configs[kind]

    def update_config(self, kind: str, **partial_fields) -> VisualizationConfig:
        """Replace fields of one visualization config; returns the new config."""
        updated = replace(self.config(kind), **partial_fields)
        self.configs[kind] = updated
        if kind == "flow":
            self._particles = None
        return updated

    # ------------------------------------------------------------------
    # Animation
    # ------------------------------------------------------------------
    def tick(self, delta: float = FRAME_TIME) -> float:
        """Advance the clock one frame and mirror its state into every config."""
        t = self.clock.advance(delta)
        for kind, cfg in self.configs.items():
            self.configs[kind] = replace(cfg, animation=self.clock.state())
        return t

    def run_frames(
        self,
        n_frames: int,
        callback: FrameCallback | None = None,
        *,
        delta: float = FRAME_TIME,
        verbose: bool = False,
    ) -> float:
        """
        Cooperative driving loop: tick ``n_frames`` times, calling
        ``callback(frame_index, api)`` after each tick.

        Returns
        -------
        float
            Clock time after the last frame.
        """
        report_every = max(1, n_frames // 10)
        for i in range(n_frames):
            t = self.tick(delta)
            if callback is not None:
                callback(i, self)
            if verbose and ((i + 1) % report_every == 0 or i + 1 == n_frames):
                print(f"  Frame {i + 1}/{n_frames}: t={t:.3f}")
        return self.clock.time

    # ------------------------------------------------------------------
    # Point queries
    # ------------------------------------------------------------------
    def vector_at(self, x: float, y: float, kind: str = "grid") -> VectorSample:
        """Pole field at ``(x, y)`` as seen by the grid or flow view."""
        cfg = self.config(kind)
        if kind == "grid":
            return evaluate_vector_field(
                x,
                y,
                self.registries["grid"].list(),
                direction=cfg.direction,
                polarity=cfg.polarity,
                t=self.clock.time * cfg.wind_speed,
                wind_strength=cfg.wind_strength,
            )
        if kind == "flow":
            return evaluate_vector_field(
                x,
                y,
                self.registries["flow"].list(),
                polarity=cfg.polarity,
                t=self.clock.time,
                flow_intensity=cfg.flow_intensity,
            )
        raise ValueError("vector_at supports kind 'grid' or 'flow'")

    def elevation_at(self, x: float, y: float) -> float:
        cfg = self.configs["topography"]
        return evaluate_scalar_field(x, y, self.elevation_points.list(), cfg.topography, t=self.clock.time)

    def slope_at(self, x: float, y: float) -> VectorSample:
        cfg = self.configs["topography"]
        return evaluate_gradient(x, y, self.elevation_points.list(), cfg.topography)

    def turbulence_at(self, x: float, y: float) -> VectorSample:
        cfg = self.configs["turbulence"]
        return evaluate_turbulence_field(
            x,
            y,
            self.turbulence_sources.list(),
            cfg.noise,
            cfg.flow,
            t=self.clock.time * cfg.speed,
            perturbation=cfg.intensity,
        )

    # ------------------------------------------------------------------
    # Batch geometry
    # ------------------------------------------------------------------
    def contours(self, *, verbose: bool = False) -> List[ContourLine]:
        """Contour fragments for every configured level, sampling the terrain once."""
        settings = self.configs["topography"].topography
        sources = self.elevation_points.list()
        grid = sample_contour_grid(sources, settings, self.width, self.height)
        levels = contour_levels(settings)
        lines: List[ContourLine] = []
        for i, level in enumerate(levels):
            fragments = extract_level(level, sources, settings, self.width, self.height, grid=grid)
            lines.extend(fragments)
            if verbose:
                print(f"  Level {i + 1}/{len(levels)} (elevation={level:.1f}): {len(fragments)} segments")
        return lines

    def streamlines(
        self,
        seeds: Sequence[Point] | np.ndarray | None = None,
        *,
        jitter: float = 0.0,
        verbose: bool = False,
    ) -> List[List[Point]]:
        """
        Integrate one streamline per seed through the turbulence field.

        Without explicit ``seeds`` a lattice of ``streamlines.line_count``
        seeds covers the canvas (jittered with the API seed when requested).
        """
        cfg = self.configs["turbulence"]
        if seeds is None:
            rng = np.random.default_rng(self.seed)
            seeds = seed_grid(self.width, self.height, cfg.streamlines.line_count, jitter=jitter, rng=rng)
        seeds = np.asarray(seeds, dtype=np.float64).reshape(-1, 2)

        integrate = partial(
            integrate_streamline,
            sources=self.turbulence_sources.list(),
            noise=cfg.noise,
            flow=cfg.flow,
            t=self.clock.time * cfg.speed,
            steps=cfg.streamlines.steps,
            step_size=cfg.streamlines.step_size,
            bounds=self.bounds,
            perturbation=cfg.intensity,
        )
        n_seeds = seeds.shape[0]
        report_every = max(1, n_seeds // 10)
        lines: List[List[Point]] = []
        for i, (sx, sy) in enumerate(seeds):
            lines.append(integrate(float(sx), float(sy)))
            if verbose and ((i + 1) % report_every == 0 or i + 1 == n_seeds):
                print(f"  Streamline {i + 1}/{n_seeds}: {len(lines[-1])} points")
        return lines

    def grid_lines(self, zoom: float = 1.0) -> List[GridLine]:
        cfg = self.configs["grid"]
        return build_grid_lines(self.width, self.height, cfg.grid, partial(self.vector_at, kind="grid"), zoom=zoom)

    def circular_lines(self, animate: bool = True) -> List[CircularFieldLine]:
        """Rings around the poles, deformed when ``interactive`` and rotated by the clock."""
        cfg = self.configs["circular"]
        build = interactive_field_lines if cfg.interactive else circular_field_lines
        lines = build(self.registries["circular"].list(), cfg.circular, self.width, self.height)
        if animate:
            lines = animate_field_lines(lines, self.clock.time, cfg.circular.animation_speed)
        return visible_field_lines(lines, self.width, self.height)

    # ------------------------------------------------------------------
    # Flow particles
    # ------------------------------------------------------------------
    @property
    def particles(self) -> ParticleSystem:
        if self._particles is None:
            cfg = self.configs["flow"]
            self._particles = ParticleSystem(
                cfg.particle_count, bounds=self.bounds, max_life=cfg.particle_life, seed=self.seed
            )
        return self._particles

    def step_particles(self) -> int:
        """Advance the flow particles one frame; returns how many respawned."""
        cfg = self.configs["flow"]
        return self.particles.step(partial(self.vector_at, kind="flow"), cfg.particle_speed)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def frame_data(self, kind: str):
        """Geometry of the current frame for the visualization tagged ``kind``."""
        if kind == "topography":
            return self.contours()
        if kind == "turbulence":
            return self.streamlines()
        if kind == "grid":
            return self.grid_lines()
        if kind == "circular":
            return self.circular_lines()
        if kind == "flow":
            return self.particles.positions.copy()
        raise ValueError(f"unknown visualization kind {kind!r}; expected one of {sorted(self.configs)}")

    def default_style(self, kind: str) -> RenderStyle:
        """Stroke style implied by the config of ``kind`` when no style is given."""
        cfg = self.config(kind)
        if kind == "circular":
            return RenderStyle(line_width=cfg.circular.line_weight, opacity=cfg.circular.opacity)
        return RenderStyle()

    def render(self, kind: str, style: RenderStyle | None = None, ax=None, fname: str | None = None):
        renderer = renderer_for(kind)
        return renderer.render(self.frame_data(kind), style or self.default_style(kind), ax=ax, fname=fname)

    def export_svg(self, kind: str, style: RenderStyle | None = None) -> str:
        renderer = renderer_for(kind)
        return renderer.export_vector(self.frame_data(kind), style or self.default_style(kind), self.width, self.height)


__all__ = ["FieldStudioAPI", "SOURCE_TYPES"]
