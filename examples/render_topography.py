#!/usr/bin/env python3
"""
Topographic map from a handful of elevation points.

Samples the terrain, extracts iso-contours with exclusion clipping and writes
a shaded elevation map with the contours overlaid, an SVG of the contours, the
raw elevation grid (``.npz``) and a JSON summary.

Example:
    python examples/render_topography.py --interval 50 --resolution 2 --quiet
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import numpy as np

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import cmasher as cmr  # noqa: E402

from field_studio import FieldStudioAPI, RenderStyle, TopographySettings, elevation_grid  # noqa: E402
from field_studio.contours import group_by_level  # noqa: E402
from field_studio.rendering import renderer_for  # noqa: E402

# (kind, x, y, elevation, radius)
DEFAULT_POINTS = (
    ("peak", 320.0, 260.0, 900.0, 180.0),
    ("peak", 820.0, 220.0, 700.0, 140.0),
    ("valley", 560.0, 560.0, 120.0, 200.0),
    ("ridge", 980.0, 600.0, 620.0, 160.0),
    ("saddle", 600.0, 330.0, 480.0, 120.0),
)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a contour map from elevation points.")
    parser.add_argument("--width", type=float, default=1200.0, help="Canvas width.")
    parser.add_argument("--height", type=float, default=800.0, help="Canvas height.")
    parser.add_argument("--interval", type=float, default=50.0, help="Contour interval.")
    parser.add_argument("--min-elevation", type=float, default=0.0)
    parser.add_argument("--max-elevation", type=float, default=1000.0)
    parser.add_argument(
        "--resolution",
        type=float,
        default=1.0,
        help="Contour grid resolution; grid step is max(2, floor(20 / resolution)).",
    )
    parser.add_argument("--cmap", default="rainforest", help="cmasher colormap for contour levels.")
    parser.add_argument(
        "--output-root",
        type=Path,
        default=Path("examples") / "topography_runs",
        help="Root directory for outputs.",
    )
    parser.add_argument("--tag", type=str, help="Optional tag appended to the output directory name.")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output.")
    return parser.parse_args(argv)


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def save_json(path: Path, data: dict) -> None:
    path.write_text(json.dumps(data, indent=2, sort_keys=True))


def build_output_dir(args: argparse.Namespace) -> Path:
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    tag = f"_{args.tag}" if args.tag else ""
    return args.output_root / f"topo_i{args.interval:g}_r{args.resolution:g}_{timestamp}{tag}"


def build_api(args: argparse.Namespace) -> FieldStudioAPI:
    api = FieldStudioAPI(width=args.width, height=args.height)
    api.update_config(
        "topography",
        topography=TopographySettings(
            contour_interval=args.interval,
            min_elevation=args.min_elevation,
            max_elevation=args.max_elevation,
            resolution=args.resolution,
        ),
    )
    for kind, x, y, elevation, radius in DEFAULT_POINTS:
        api.elevation_points.add(kind, x, y, elevation=elevation, radius=radius)
    return api


def plot_elevation_map(api: FieldStudioAPI, elevation: np.ndarray, lines, style: RenderStyle, fname: Path) -> None:
    fig, ax = plt.subplots(figsize=(9.0, 6.0), dpi=140)
    im = ax.imshow(
        elevation,
        cmap=cmr.rainforest,
        origin="upper",
        extent=(0.0, api.width, api.height, 0.0),
        alpha=0.55,
    )
    renderer_for("topography").render(lines, style, ax=ax)
    for src in api.elevation_points:
        ax.plot(src.x, src.y, marker="^" if src.kind != "valley" else "v", color="k", ms=5)
        ax.annotate(src.name, (src.x, src.y), textcoords="offset points", xytext=(6, 6), fontsize=7)
    ax.set_xlim(0.0, api.width)
    ax.set_ylim(api.height, 0.0)
    ax.set_xticks([])
    ax.set_yticks([])
    fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04, label="elevation")
    fig.savefig(fname, bbox_inches="tight")
    plt.close(fig)


def main(argv: Sequence[str]) -> int:
    args = parse_args(argv)
    out_dir = build_output_dir(args)
    ensure_dir(out_dir)
    verbose = not args.quiet

    api = build_api(args)
    settings = api.config("topography").topography

    if verbose:
        print(f"Extracting contours on {args.width:g}x{args.height:g} canvas")
    lines = api.contours(verbose=verbose)

    xs = np.arange(0.0, args.width, 4.0)
    ys = np.arange(0.0, args.height, 4.0)
    elevation = elevation_grid(xs, ys, api.elevation_points.list(), settings)
    np.savez_compressed(out_dir / "elevation_grid.npz", xs=xs, ys=ys, elevation=elevation)

    style = RenderStyle(cmap=args.cmap, line_width=0.8)
    plot_elevation_map(api, elevation, lines, style, out_dir / "contour_map.png")
    svg = renderer_for("topography").export_vector(lines, style, api.width, api.height)
    (out_dir / "contours.svg").write_text(svg)

    per_level = {f"{level:g}": len(fragments) for level, fragments in sorted(group_by_level(lines).items())}
    save_json(
        out_dir / "summary.json",
        {
            "width": args.width,
            "height": args.height,
            "contour_interval": settings.contour_interval,
            "resolution": settings.resolution,
            "n_sources": len(api.elevation_points),
            "n_segments": len(lines),
            "segments_per_level": per_level,
            "elevation_min": float(elevation.min()),
            "elevation_max": float(elevation.max()),
        },
    )
    if verbose:
        print(f"Wrote {len(lines)} segments over {len(per_level)} levels to {out_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
