"""
Benchmark the tiled renderer against the full-frame reference.

Each resolution runs a scripted interactive session (cold render, warm
re-render, pan, zoom in) and reports time and cache behavior per step.

Usage examples:
  tilebrot-bench --res 800x600,1280x720 --max-iter 1000 --runs 3
  tilebrot-bench --tile-size 64 --workers 4 --strict --csv bench.csv
"""

import argparse
import csv
import logging
import platform
import time
from typing import Callable, List, Optional, Tuple

from tilebrot.fractals.base import Viewport, RenderSettings
from tilebrot.rendering.engines.base import BaseRenderEngine
from tilebrot.rendering.engines.full_frame import FullFrameEngine
from tilebrot.rendering.engines.tile import TileEngine

logger = logging.getLogger(__name__)

CSV_HEADER = ["resolution", "engine", "step", "avg_ms", "tiles", "cache_hits",
              "computed", "uniform", "evaluations"]

# --- Helpers -----------------------------------------------------------------

def parse_resolution_list(res_str: str) -> List[Tuple[int, int]]:
    """
    Parse resolutions like "800x600,1280x720".
    """
    if not res_str:
        return [(800, 600), (1280, 720)]
    out: List[Tuple[int, int]] = []
    for token in res_str.split(','):
        token = token.strip().lower()
        if not token:
            continue
        w, h = token.split('x')
        out.append((int(w), int(h)))
    return out


def session_steps(pan_px: int) -> List[Tuple[str, Callable[[Viewport], None]]]:
    """
    The scripted session: each step mutates the viewport, then renders.
    """
    return [
        ("cold", lambda vp: None),
        ("warm", lambda vp: None),
        ("pan", lambda vp: vp.pan(pan_px, pan_px // 2)),
        ("zoom", lambda vp: vp.zoom_at(1, vp.width // 2, vp.height // 2)),
    ]

# --- Benchmark core ----------------------------------------------------------

def benchmark_engine(make_engine: Callable[[], BaseRenderEngine],
                     base_vp: Viewport,
                     runs: int) -> List[Tuple[str, float, object]]:
    """
    Replays the session `runs` times on fresh engines.
    Returns (step, avg_ms, stats of the last run) per step.
    """
    steps = session_steps(pan_px=max(1, base_vp.width // 8))
    times = {name: [] for name, _ in steps}
    last_stats = {}
    for _ in range(max(1, runs)):
        vp = base_vp.copy()
        with make_engine() as engine:
            for name, mutate in steps:
                mutate(vp)
                t0 = time.perf_counter()
                engine.render(vp)
                times[name].append((time.perf_counter() - t0) * 1000.0)
                last_stats[name] = engine.last_stats
    return [(name, sum(times[name]) / len(times[name]), last_stats[name])
            for name, _ in steps]


def warm_up_kernels() -> None:
    """Compile the numba kernels once so the first timed render is fair."""
    with TileEngine(RenderSettings(tile_size=8, max_workers=1)) as engine:
        engine.render(Viewport(width=16, height=16, max_iter=8))

# --- CLI ---------------------------------------------------------------------

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tilebrot-bench",
                                description="Benchmark the tiled Mandelbrot renderer.")
    p.add_argument("--res", type=str, default="800x600,1280x720",
                   help="Comma separated WxH list")
    p.add_argument("--tile-size", type=int, default=32)
    p.add_argument("--max-iter", type=int, default=500)
    p.add_argument("--zoom", type=int, default=250)
    p.add_argument("--center", type=str, default="-100,0",
                   help="Grid center as X,Y in zoom units (use --center=-100,0 for negatives)")
    p.add_argument("--workers", type=int, default=None)
    p.add_argument("--runs", type=int, default=3)
    p.add_argument("--strict", action="store_true",
                   help="Disable the border uniformity shortcut")
    p.add_argument("--csv", type=str, default=None)
    p.add_argument("--log-level", type=str, default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s - %(message)s")

    settings = RenderSettings(tile_size=args.tile_size, max_workers=args.workers,
                              uniform_check=not args.strict)
    cx, cy = (int(v) for v in args.center.split(","))

    print("=== Hardware Summary ===")
    print("CPU:", platform.processor() or platform.machine() or "Unknown CPU")
    print()

    warm_up_kernels()

    engines = [
        ("tiled", lambda: TileEngine(settings)),
        ("full-frame", lambda: FullFrameEngine(settings)),
    ]

    rows = []
    for width, height in parse_resolution_list(args.res):
        base_vp = Viewport(width=width, height=height, center_x=cx, center_y=cy,
                           zoom=args.zoom, max_iter=args.max_iter)
        print(f"--- {width}x{height} ---")
        for label, factory in engines:
            for step, avg_ms, stats in benchmark_engine(factory, base_vp, args.runs):
                print(f"{label:>10} {step:>5}: {avg_ms:9.2f} ms  "
                      f"tiles={stats.tiles} hits={stats.cache_hits} "
                      f"evals={stats.evaluations}")
                rows.append([f"{width}x{height}", label, step, f"{avg_ms:.3f}",
                             stats.tiles, stats.cache_hits, stats.computed,
                             stats.uniform, stats.evaluations])

    if args.csv:
        with open(args.csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADER)
            writer.writerows(rows)
        logger.info("Results written to %s", args.csv)
        print(f"\nResults written to {args.csv}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
