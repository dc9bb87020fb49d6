"""Execution helpers for Mandelbrot CLI workflows."""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np
from PIL import Image

from . import baseline, computation
from .baseline import check_buffer
from .config import RenderConfig
from .report import RenderReport


def _log(tag: str, message: str) -> None:
    print(f"[{tag}] {message}", flush=True)


def _chunk_record(chunk_id: int, start: int, end: int, comp_time: float) -> Dict:
    """Create a uniform chunk metadata record; ``end_row`` is exclusive."""
    return {
        "chunk_id": int(chunk_id),
        "start_row": int(start),
        "end_row": int(end),
        "comp_time": comp_time,
    }


def _render_chunks(config: RenderConfig, pixels: np.ndarray) -> Tuple[float, List[Dict]]:
    comp_total = 0.0
    chunk_details: List[Dict] = []
    for chunk_id in range(config.total_chunks):
        t0 = time.perf_counter()
        start, end = computation.compute_chunk(
            pixels,
            config.bounds,
            config.upper_left,
            config.lower_right,
            config.chunk_size,
            chunk_id,
        )
        elapsed = time.perf_counter() - t0
        _log(f"Chunk {chunk_id}", f"Computing rows {start}:{end} took {elapsed:.4f}s")
        comp_total += elapsed
        chunk_details.append(_chunk_record(chunk_id, start, end, elapsed))
    return comp_total, chunk_details


def run_render(config: RenderConfig) -> RenderReport:
    """Render ``config`` into a freshly allocated buffer."""
    start_time = time.perf_counter()
    pixels = computation.allocate_pixels(config.bounds)

    if config.backend == "baseline":
        baseline.render(pixels, config.bounds, config.upper_left, config.lower_right)
        comp_total = time.perf_counter() - start_time
        chunk_records = None
        chunks = 1
    else:
        comp_total, chunk_records = _render_chunks(config, pixels)
        chunks = len(chunk_records)

    timing = {
        "wall_time": time.perf_counter() - start_time,
        "comp_total": comp_total,
        "total_chunks": chunks,
    }
    return RenderReport(pixels, config.bounds, timing, chunk_records)


def write_image(path: str | Path, pixels, bounds: Tuple[int, int]) -> Path:
    """Save a row-major intensity buffer as ``.npy`` or a grayscale image."""
    check_buffer(pixels, bounds)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    image = computation.as_byte_view(pixels).reshape(bounds[1], bounds[0])

    if path.suffix == ".npy":
        np.save(path, image)
        return path

    # 2-D uint8 arrays map to single-channel mode "L".
    Image.fromarray(np.ascontiguousarray(image)).save(path)
    return path


def run_single_render(
    config: RenderConfig,
    suite_name: Optional[str] = None,
    *,
    track: bool = False,
) -> RenderReport:
    """Render, save and optionally track a single configuration."""
    _log(
        "Render",
        f"Starting '{config.run_name}' "
        f"(backend={config.backend}, size={config.image_size}, chunks={config.total_chunks})",
    )

    report = run_render(config)
    path = write_image(config.output, report.pixels, config.bounds)
    _log("Output", f"Image saved to {path}")

    if track:
        from .tracking import log_to_mlflow

        suite = suite_name or os.environ.get("MANDELRASTER_SUITE") or "default"
        log_to_mlflow(config, report, suite)

    _log("Timing", f"Total: {report.timing['wall_time']:.4f}s")
    return report


def run_sweep(
    configs: List[RenderConfig],
    task_id: Optional[int] = None,
    suite_name: Optional[str] = None,
    descriptor: str = "sweep",
    *,
    track: bool = False,
) -> int:
    """Run a batch of configurations and return a process exit code."""
    if not configs:
        print("ERROR: No configurations found in sweep", file=sys.stderr)
        return 1

    if task_id is not None:
        if task_id < 0 or task_id >= len(configs):
            print(f"ERROR: task-id {task_id} out of range [0, {len(configs) - 1}]", file=sys.stderr)
            return 1
        config = configs[task_id]
        _log(f"Task {task_id}", f"Running: {config.run_name}")
        return 0 if _run_guarded(config, suite_name, track) else 1

    print("=" * 70)
    print(f"Running {len(configs)} configurations from {descriptor}")
    print("=" * 70)

    failures: list[tuple[int, str]] = []
    for idx, cfg in enumerate(configs):
        print(f"\n[{idx + 1}/{len(configs)}] {cfg.run_name}")
        if not _run_guarded(cfg, suite_name, track):
            failures.append((idx, cfg.run_name))

    print("\n" + "=" * 70)
    print("Summary")
    print("=" * 70)
    print(f"Total:      {len(configs)}")
    print(f"Successful: {len(configs) - len(failures)}")
    print(f"Failed:     {len(failures)}")

    if failures:
        print("\nFailed configurations:")
        for idx, name in failures:
            print(f"  [{idx}] {name}")
        return 1

    return 0


def _run_guarded(config: RenderConfig, suite_name: Optional[str], track: bool) -> bool:
    try:
        run_single_render(config, suite_name, track=track)
    except (OSError, ValueError) as exc:
        print(f"    ✗ FAILED: {exc}", file=sys.stderr)
        return False
    print("    ✓ Completed")
    return True
