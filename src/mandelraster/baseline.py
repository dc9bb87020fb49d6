"""Reference escape-time renderer in plain Python."""

from __future__ import annotations

from typing import MutableSequence, Optional, Tuple

ITERATION_LIMIT = 255

__all__ = ["ITERATION_LIMIT", "pixel_to_point", "escape_time", "render", "check_buffer"]


def pixel_to_point(
    bounds: Tuple[int, int],
    pixel: Tuple[int, int],
    upper_left: complex,
    lower_right: complex,
) -> complex:
    """Map a ``(column, row)`` pixel onto the plane window.

    Row 0 is the top edge of the window, i.e. the largest imaginary part.
    """
    plane_width = lower_right.real - upper_left.real
    plane_height = upper_left.imag - lower_right.imag
    return complex(
        upper_left.real + pixel[0] * plane_width / bounds[0],
        upper_left.imag - pixel[1] * plane_height / bounds[1],
    )


def escape_time(c: complex, limit: int) -> Optional[int]:
    """Return the iteration at which ``z -> z*z + c`` left radius 2, else None.

    The squared modulus is compared against 4.0 so no square root is taken.
    ``z*z`` is expanded into real arithmetic so every operation is rounded
    separately, matching the compiled kernel bit for bit.
    """
    zr, zi = 0.0, 0.0
    for i in range(limit):
        if zr * zr + zi * zi > 4.0:
            return i
        zr, zi = zr * zr - zi * zi + c.real, 2.0 * zr * zi + c.imag
    return None


def check_buffer(pixels, bounds: Tuple[int, int]) -> None:
    expected = bounds[0] * bounds[1]
    if len(pixels) != expected:
        raise ValueError(
            f"Pixel buffer holds {len(pixels)} bytes, expected {expected} "
            f"for a {bounds[0]}x{bounds[1]} image"
        )


def render(
    pixels: MutableSequence[int],
    bounds: Tuple[int, int],
    upper_left: complex,
    lower_right: complex,
) -> None:
    """Fill ``pixels`` row-major with one intensity byte per pixel."""
    check_buffer(pixels, bounds)
    width, height = bounds
    for row in range(height):
        for column in range(width):
            point = pixel_to_point(bounds, (column, row), upper_left, lower_right)
            count = escape_time(point, ITERATION_LIMIT)
            pixels[row * width + column] = 0 if count is None else ITERATION_LIMIT - count
