from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from numba import njit, prange

from .baseline import ITERATION_LIMIT, check_buffer

__all__ = ["allocate_pixels", "as_byte_view", "total_chunks", "compute_chunk", "render"]


def allocate_pixels(bounds: Tuple[int, int]) -> np.ndarray:
    return np.zeros(bounds[0] * bounds[1], dtype=np.uint8)


def as_byte_view(pixels) -> np.ndarray:
    """Return a writable flat uint8 view sharing memory with ``pixels``."""
    if isinstance(pixels, np.ndarray):
        if pixels.dtype != np.uint8 or pixels.ndim != 1:
            raise ValueError(f"Expected a flat uint8 buffer, got {pixels.dtype} with shape {pixels.shape}")
        return pixels
    return np.frombuffer(pixels, dtype=np.uint8)


def total_chunks(height: int, chunk_size: int) -> int:
    return (height + chunk_size - 1) // chunk_size


@njit
def _intensity(re: float, im: float, limit: int) -> int:
    zr = 0.0
    zi = 0.0
    for i in range(limit):
        if zr * zr + zi * zi > 4.0:
            return limit - i
        zr, zi = zr * zr - zi * zi + re, 2.0 * zr * zi + im
    return 0


@njit(parallel=True)
def _render_rows(
    pixels: np.ndarray,
    width: int,
    height: int,
    start_row: int,
    end_row: int,
    ul_re: float,
    ul_im: float,
    lr_re: float,
    lr_im: float,
    limit: int,
) -> None:
    plane_width = lr_re - ul_re
    plane_height = ul_im - lr_im
    for local_row in prange(end_row - start_row):
        row = start_row + local_row
        im = ul_im - row * plane_height / height
        offset = row * width
        for column in range(width):
            re = ul_re + column * plane_width / width
            pixels[offset + column] = np.uint8(_intensity(re, im, limit))


def _check_chunk_size(chunk_size: int) -> None:
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")


def _chunk_rows(height: int, chunk_size: int, chunk_id: int) -> Tuple[int, int]:
    start_row = chunk_id * chunk_size
    if start_row >= height:
        return start_row, start_row
    return start_row, min(start_row + chunk_size, height)


def compute_chunk(
    pixels: np.ndarray,
    bounds: Tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    chunk_size: int,
    chunk_id: int,
) -> Tuple[int, int]:
    """Render rows ``[start_row, end_row)`` of one chunk into ``pixels``."""
    width, height = bounds
    _check_chunk_size(chunk_size)
    start_row, end_row = _chunk_rows(height, chunk_size, chunk_id)
    if end_row > start_row:
        _render_rows(
            pixels,
            width,
            height,
            start_row,
            end_row,
            float(upper_left.real),
            float(upper_left.imag),
            float(lower_right.real),
            float(lower_right.imag),
            ITERATION_LIMIT,
        )
    return start_row, end_row


def render(
    pixels,
    bounds: Tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    chunk_size: Optional[int] = None,
) -> None:
    """Compiled counterpart of :func:`mandelraster.baseline.render`."""
    check_buffer(pixels, bounds)
    if chunk_size is not None:
        _check_chunk_size(chunk_size)
    view = as_byte_view(pixels)
    height = bounds[1]
    if height == 0:
        return
    if chunk_size is None:
        chunk_size = height
    for chunk_id in range(total_chunks(height, chunk_size)):
        compute_chunk(view, bounds, upper_left, lower_right, chunk_size, chunk_id)
