#!/usr/bin/env python3
"""
Animated turbulence streamlines.

Places a few turbulence emitters, drives the animation clock for a number of
frames and, every ``--frame-interval`` frames, integrates streamlines through
the current field and saves a PNG of them over the flow speed. The streamlines
of the last frame are also exported as SVG and ``.npz``.

Example:
    python examples/render_turbulence.py --frames 120 --frame-interval 40 --lines 600 --quiet
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import numpy as np

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import cmasher as cmr  # noqa: E402

from field_studio import FieldStudioAPI, NoiseConfig, RenderStyle, StreamlineSettings  # noqa: E402
from field_studio.rendering import renderer_for  # noqa: E402

# (kind, x, y, strength, angle)
DEFAULT_EMITTERS = (
    ("vortex", 400.0, 300.0, 60.0, 0.0),
    ("vortex", 800.0, 500.0, -45.0, 0.0),
    ("source", 200.0, 650.0, 40.0, 0.0),
    ("sink", 1000.0, 200.0, 50.0, 0.0),
    ("uniform", 600.0, 100.0, 30.0, 30.0),
)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render animated turbulence streamlines.")
    parser.add_argument("--width", type=float, default=1200.0, help="Canvas width.")
    parser.add_argument("--height", type=float, default=800.0, help="Canvas height.")
    parser.add_argument("--frames", type=int, default=90, help="Number of animation frames to run.")
    parser.add_argument("--frame-interval", type=int, default=30, help="Save a snapshot every N frames.")
    parser.add_argument("--lines", type=int, default=800, help="Number of streamline seeds.")
    parser.add_argument("--steps", type=int, default=150, help="Maximum points per streamline.")
    parser.add_argument("--step-size", type=float, default=3.0, help="Euler step length.")
    parser.add_argument("--octaves", type=int, default=4, help="Noise octaves.")
    parser.add_argument("--speed", type=float, default=1.0, help="Animation speed multiplier.")
    parser.add_argument("--jitter", type=float, default=0.5, help="Seed jitter in cell units.")
    parser.add_argument("--seed", type=int, default=0, help="RNG seed for seed jitter.")
    parser.add_argument(
        "--output-root",
        type=Path,
        default=Path("examples") / "turbulence_runs",
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
    return args.output_root / f"turb_n{args.lines}_o{args.octaves}_{timestamp}{tag}"


def build_api(args: argparse.Namespace) -> FieldStudioAPI:
    api = FieldStudioAPI(width=args.width, height=args.height, seed=args.seed)
    api.clock.speed_multiplier = args.speed
    api.update_config(
        "turbulence",
        noise=NoiseConfig(octaves=args.octaves),
        streamlines=StreamlineSettings(line_count=args.lines, steps=args.steps, step_size=args.step_size),
    )
    for kind, x, y, strength, angle in DEFAULT_EMITTERS:
        api.turbulence_sources.add(kind, x, y, strength=strength, angle=angle)
    return api


def speed_grid(api: FieldStudioAPI, spacing: float = 10.0) -> np.ndarray:
    xs = np.arange(0.0, api.width, spacing)
    ys = np.arange(0.0, api.height, spacing)
    return np.array([[api.turbulence_at(float(x), float(y)).magnitude for x in xs] for y in ys])


def plot_frame(api: FieldStudioAPI, lines: List, fname: Path) -> None:
    fig, ax = plt.subplots(figsize=(9.0, 6.0), dpi=140)
    im = ax.imshow(
        speed_grid(api),
        cmap=cmr.iceburn,
        origin="upper",
        extent=(0.0, api.width, api.height, 0.0),
    )
    renderer_for("turbulence").render(lines, RenderStyle(color="#f5f5f5", line_width=0.4, opacity=0.7), ax=ax)
    ax.set_xlim(0.0, api.width)
    ax.set_ylim(api.height, 0.0)
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(f"t = {api.time:.3f}")
    fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04, label=r"$|\mathbf{u}|$")
    fig.savefig(fname, bbox_inches="tight")
    plt.close(fig)


def main(argv: Sequence[str]) -> int:
    args = parse_args(argv)
    out_dir = build_output_dir(args)
    frame_dir = out_dir / "frames"
    ensure_dir(frame_dir)
    verbose = not args.quiet

    api = build_api(args)
    snapshots = []
    last_lines: List = []

    def snapshot(frame: int, studio: FieldStudioAPI) -> None:
        nonlocal last_lines
        if (frame + 1) % args.frame_interval and frame + 1 != args.frames:
            return
        last_lines = studio.streamlines(jitter=args.jitter)
        fname = frame_dir / f"frame_{frame + 1:05d}.png"
        plot_frame(studio, last_lines, fname)
        lengths = [len(line) for line in last_lines]
        snapshots.append({"frame": frame + 1, "time": studio.time, "mean_length": float(np.mean(lengths))})
        if verbose:
            print(f"  Snapshot {fname.name}: mean length {np.mean(lengths):.1f} points")

    api.run_frames(args.frames, snapshot, verbose=verbose)

    if last_lines:
        svg = renderer_for("turbulence").export_vector(last_lines, RenderStyle(line_width=0.5), api.width, api.height)
        (out_dir / "streamlines.svg").write_text(svg)
        padded = np.full((len(last_lines), args.steps, 2), np.nan)
        for i, line in enumerate(last_lines):
            padded[i, : len(line)] = line
        np.savez_compressed(out_dir / "streamlines.npz", points=padded)

    save_json(
        out_dir / "summary.json",
        {
            "frames": args.frames,
            "final_time": api.time,
            "n_emitters": len(api.turbulence_sources),
            "noise_octaves": args.octaves,
            "n_lines": args.lines,
            "snapshots": snapshots,
        },
    )
    if verbose:
        print(f"Saved {len(snapshots)} snapshots to {out_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
