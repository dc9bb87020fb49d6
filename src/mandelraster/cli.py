from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import BACKENDS, default_render_config, load_named_sweep_configs
from .execution import run_single_render, run_sweep
from .parsing import parse_bounds, parse_complex


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Render grayscale Mandelbrot escape-time images.")
    parser.add_argument("--track", action="store_true", help="Log runs to MLflow")
    commands = parser.add_subparsers(dest="command", required=True)

    # Corners such as -1.20,0.35 look like options to argparse, hence the '--'.
    render = commands.add_parser(
        "render",
        help="Render a single image",
        epilog="Example: mandelraster render --chunk-size 32 -- mandel.png 1000x750 -1.20,0.35 -1,0.20",
    )
    render.add_argument("file", help="Output image (.png, .npy, ...)")
    render.add_argument("pixels", help="Image size as WIDTHxHEIGHT")
    render.add_argument("upper_left", help="Upper-left corner as RE,IM")
    render.add_argument("lower_right", help="Lower-right corner as RE,IM")
    render.add_argument("--backend", choices=BACKENDS, default="numba")
    render.add_argument("--chunk-size", type=int, default=64, help="Rows per timed chunk")

    sweep = commands.add_parser("sweep", help="Run configurations from a sweep YAML file")
    sweep.add_argument("path", type=str, help="Path to sweep YAML file")
    sweep.add_argument("--suite", type=str, help="Name of suite/experiment within sweep file")
    sweep.add_argument("--list-suites", action="store_true", help="List suites in sweep file")
    sweep.add_argument("--task-id", type=int, help="Run specific config index")

    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    if args.command == "sweep":
        return _main_sweep(args)
    return _main_render(args)


def _main_render(args) -> int:
    bounds = parse_bounds(args.pixels)
    if bounds is None:
        sys.exit(f"ERROR: error parsing image dimensions {args.pixels!r}, expected WIDTHxHEIGHT")
    upper_left = parse_complex(args.upper_left)
    if upper_left is None:
        sys.exit(f"ERROR: error parsing upper left corner point {args.upper_left!r}")
    lower_right = parse_complex(args.lower_right)
    if lower_right is None:
        sys.exit(f"ERROR: error parsing lower right corner point {args.lower_right!r}")

    try:
        config = default_render_config(
            width=bounds[0],
            height=bounds[1],
            upper_left=upper_left,
            lower_right=lower_right,
            output=args.file,
            backend=args.backend,
            chunk_size=args.chunk_size,
        )
        run_single_render(config, track=args.track)
    except (OSError, ValueError) as exc:
        sys.exit(f"ERROR: {exc}")
    return 0


def _main_sweep(args) -> int:
    sweep_path = Path(args.path)

    try:
        if args.list_suites:
            for name, configs in load_named_sweep_configs(sweep_path):
                print(f"{name}: {len(configs)} configurations")
            return 0

        if args.task_id is not None and args.suite is None:
            sys.exit("ERROR: --task-id requires --suite")

        suites = load_named_sweep_configs(sweep_path, args.suite)
    except (OSError, ValueError) as exc:
        sys.exit(f"ERROR: {exc}")

    exit_code = 0
    for suite_name, configs in suites:
        descriptor = f"{sweep_path}::{suite_name}"
        rc = run_sweep(configs, args.task_id, suite_name, descriptor, track=args.track)
        exit_code = exit_code or rc
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
