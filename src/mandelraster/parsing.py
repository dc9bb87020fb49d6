"""Text parsing for image sizes and plane corners.

Every parser returns ``None`` for malformed input instead of raising, so the
caller decides how to report it.
"""

from __future__ import annotations

from typing import Callable, Optional, Tuple, TypeVar

T = TypeVar("T")

__all__ = ["parse_pair", "parse_complex", "parse_bounds"]


def _strict(convert: Callable[[str], T], text: str) -> T:
    # float() and int() also accept padding and digit separators such as "1_0".
    if text != text.strip() or "_" in text:
        raise ValueError(f"invalid number {text!r}")
    return convert(text)


def parse_pair(s: str, separator: str, convert: Callable[[str], T] = float) -> Optional[Tuple[T, T]]:
    """Split ``s`` at the first ``separator`` and convert both halves."""
    index = s.find(separator)
    if index < 0:
        return None
    try:
        return _strict(convert, s[:index]), _strict(convert, s[index + len(separator):])
    except ValueError:
        return None


def parse_complex(s: str) -> Optional[complex]:
    pair = parse_pair(s, ",")
    if pair is None:
        return None
    return complex(pair[0], pair[1])


def parse_bounds(s: str, separator: str = "x") -> Optional[Tuple[int, int]]:
    """Parse ``"WxH"`` into positive integer pixel bounds."""
    pair = parse_pair(s, separator, int)
    if pair is None or pair[0] <= 0 or pair[1] <= 0:
        return None
    return pair
