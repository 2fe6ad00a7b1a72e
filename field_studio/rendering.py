"""
Presentation strategies: matplotlib rendering and SVG export per visualization.

Each strategy is independent and implements the :class:`FieldRenderer`
protocol. :func:`renderer_for` selects one by visualization kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt
import cmasher as cmr
import svgwrite
from matplotlib.collections import LineCollection
from matplotlib.colors import Normalize, to_hex
from matplotlib.path import Path as MplPath
from matplotlib.patches import PathPatch

from .circular import CircularFieldLine
from .contours import ContourLine
from .vector_field import GridLine

Point = Tuple[float, float]


@dataclass
class RenderStyle:
    """
    Stroke styling shared by all strategies.

    ``cmap`` names a cmasher colormap used to colour contour levels; when it
    is None every stroke uses ``color``.
    """

    color: str = "#000000"
    line_width: float = 1.0
    opacity: float = 1.0
    cmap: Optional[str] = None
    background: str = "#ffffff"
    marker_size: float = 1.5


class FieldRenderer(Protocol):
    def render(self, data, style: RenderStyle, ax: Optional[plt.Axes] = None, fname: Optional[str] = None) -> plt.Axes:
        ...

    def export_vector(self, data, style: RenderStyle, width: float, height: float) -> str:
        ...


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _prepare_axes(ax: Optional[plt.Axes], style: RenderStyle) -> Tuple[plt.Axes, bool]:
    """Axes to draw on, and whether this call created their figure."""
    owns_figure = ax is None
    if owns_figure:
        _, ax = plt.subplots(figsize=(8.0, 5.4), dpi=140)
    ax.set_facecolor(style.background)
    ax.set_aspect("equal")
    return ax, owns_figure


def _finish_axes(ax: plt.Axes, fname: Optional[str], owns_figure: bool) -> plt.Axes:
    ax.autoscale_view()
    if not ax.yaxis_inverted():
        # canvas coordinates: y grows downward
        ax.invert_yaxis()
    if fname:
        fig = ax.figure
        fig.savefig(fname, bbox_inches="tight")
        if owns_figure:
            plt.close(fig)
    return ax


def _drawing(width: float, height: float, style: RenderStyle) -> svgwrite.Drawing:
    dwg = svgwrite.Drawing(size=(float(width), float(height)))
    dwg.viewbox(0, 0, float(width), float(height))
    dwg.add(dwg.rect(insert=(0, 0), size=("100%", "100%"), fill=style.background))
    return dwg


def _stroke(style: RenderStyle, color: Optional[str] = None) -> dict:
    return dict(
        fill="none",
        stroke=color or style.color,
        stroke_width=float(style.line_width),
        stroke_opacity=float(style.opacity),
    )


def _points(points: Sequence[Point]) -> list:
    return [(float(x), float(y)) for x, y in points]


def level_colors(levels: Sequence[float], style: RenderStyle) -> Dict[float, str]:
    """Hex colour per contour level, sampled from ``style.cmap`` when set."""
    unique = sorted(set(levels))
    if style.cmap is None or not unique:
        return {lvl: style.color for lvl in unique}
    cmap = getattr(cmr, style.cmap)
    norm = Normalize(vmin=unique[0], vmax=unique[-1] if unique[-1] > unique[0] else unique[0] + 1.0)
    return {lvl: to_hex(cmap(norm(lvl))) for lvl in unique}


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class ContourRenderer:
    """Iso-contour fragments, optionally coloured by elevation."""

    def render(self, data: Sequence[ContourLine], style: RenderStyle, ax=None, fname=None) -> plt.Axes:
        ax, owns_figure = _prepare_axes(ax, style)
        colors = level_colors([line.elevation for line in data], style)
        segments = [line.points for line in data if len(line.points) >= 2]
        seg_colors = [colors[line.elevation] for line in data if len(line.points) >= 2]
        ax.add_collection(LineCollection(segments, colors=seg_colors, linewidths=style.line_width, alpha=style.opacity))
        return _finish_axes(ax, fname, owns_figure)

    def export_vector(self, data: Sequence[ContourLine], style: RenderStyle, width: float, height: float) -> str:
        dwg = _drawing(width, height, style)
        colors = level_colors([line.elevation for line in data], style)
        for line in data:
            if len(line.points) >= 2:
                dwg.add(dwg.polyline(_points(line.points), **_stroke(style, colors[line.elevation])))
        return dwg.tostring()


class StreamlineRenderer:
    """Streamline polylines from the turbulence integrator."""

    def render(self, data: Sequence[Sequence[Point]], style: RenderStyle, ax=None, fname=None) -> plt.Axes:
        ax, owns_figure = _prepare_axes(ax, style)
        lines = [list(points) for points in data if len(points) >= 2]
        ax.add_collection(LineCollection(lines, colors=style.color, linewidths=style.line_width, alpha=style.opacity))
        return _finish_axes(ax, fname, owns_figure)

    def export_vector(self, data: Sequence[Sequence[Point]], style: RenderStyle, width: float, height: float) -> str:
        dwg = _drawing(width, height, style)
        for points in data:
            if len(points) >= 2:
                dwg.add(dwg.polyline(_points(points), **_stroke(style)))
        return dwg.tostring()


class GridLineRenderer:
    """Cubic Bezier glyphs of the grid field."""

    def render(self, data: Sequence[GridLine], style: RenderStyle, ax=None, fname=None) -> plt.Axes:
        ax, owns_figure = _prepare_axes(ax, style)
        codes = [MplPath.MOVETO, MplPath.CURVE4, MplPath.CURVE4, MplPath.CURVE4]
        for line in data:
            path = MplPath([line.start, line.control1, line.control2, line.end], codes)
            ax.add_patch(
                PathPatch(path, facecolor="none", edgecolor=style.color, linewidth=style.line_width, alpha=style.opacity)
            )
        return _finish_axes(ax, fname, owns_figure)

    def export_vector(self, data: Sequence[GridLine], style: RenderStyle, width: float, height: float) -> str:
        dwg = _drawing(width, height, style)
        for line in data:
            path = dwg.path(d=("M", *_points([line.start])[0]), **_stroke(style))
            path.push("C", *[c for pt in _points([line.control1, line.control2, line.end]) for c in pt])
            dwg.add(path)
        return dwg.tostring()


class CircularFieldRenderer:
    """Concentric (possibly deformed) rings around poles."""

    def render(self, data: Sequence[CircularFieldLine], style: RenderStyle, ax=None, fname=None) -> plt.Axes:
        ax, owns_figure = _prepare_axes(ax, style)
        rings = [line.points for line in data if len(line.points) >= 2]
        ax.add_collection(LineCollection(rings, colors=style.color, linewidths=style.line_width, alpha=style.opacity))
        return _finish_axes(ax, fname, owns_figure)

    def export_vector(self, data: Sequence[CircularFieldLine], style: RenderStyle, width: float, height: float) -> str:
        dwg = _drawing(width, height, style)
        for line in data:
            if len(line.points) >= 2:
                dwg.add(dwg.polygon(_points(line.points), **_stroke(style)))
        return dwg.tostring()


class ParticleRenderer:
    """Particle positions of the flow field, shape ``(n, 2)``."""

    def render(self, data: np.ndarray, style: RenderStyle, ax=None, fname=None) -> plt.Axes:
        ax, owns_figure = _prepare_axes(ax, style)
        pts = np.asarray(data, dtype=np.float64).reshape(-1, 2)
        ax.scatter(pts[:, 0], pts[:, 1], s=style.marker_size**2, c=style.color, alpha=style.opacity, linewidths=0)
        return _finish_axes(ax, fname, owns_figure)

    def export_vector(self, data: np.ndarray, style: RenderStyle, width: float, height: float) -> str:
        dwg = _drawing(width, height, style)
        for x, y in np.asarray(data, dtype=np.float64).reshape(-1, 2):
            dwg.add(
                dwg.circle(
                    center=(float(x), float(y)),
                    r=float(style.marker_size),
                    fill=style.color,
                    fill_opacity=float(style.opacity),
                )
            )
        return dwg.tostring()


RENDERERS: Dict[str, FieldRenderer] = {
    "topography": ContourRenderer(),
    "turbulence": StreamlineRenderer(),
    "grid": GridLineRenderer(),
    "circular": CircularFieldRenderer(),
    "flow": ParticleRenderer(),
}


def renderer_for(kind: str) -> FieldRenderer:
    """Rendering strategy for the visualization tagged ``kind``."""
    try:
        return RENDERERS[kind]
    except KeyError:
        raise ValueError(f"no renderer for visualization kind {kind!r}; expected one of {sorted(RENDERERS)}") from None


__all__ = [
    "RenderStyle",
    "FieldRenderer",
    "ContourRenderer",
    "StreamlineRenderer",
    "GridLineRenderer",
    "CircularFieldRenderer",
    "ParticleRenderer",
    "RENDERERS",
    "level_colors",
    "renderer_for",
]
