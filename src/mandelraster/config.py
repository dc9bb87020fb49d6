"""Configuration objects and YAML loading for Mandelbrot renders."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from itertools import product
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import yaml

from .parsing import parse_bounds, parse_complex

BACKENDS = ("numba", "baseline")


@dataclass(frozen=True)
class RenderConfig:
    """Everything needed to render and save a single image."""

    width: int
    height: int
    upper_left: complex
    lower_right: complex
    output: str
    backend: str = "numba"  # 'numba' or 'baseline'
    chunk_size: int = 64

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend {self.backend!r}, expected one of {BACKENDS}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

    @property
    def bounds(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def total_chunks(self) -> int:
        return (self.height + self.chunk_size - 1) // self.chunk_size

    @property
    def image_size(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def run_name(self) -> str:
        """Generate unique run name embedding all parameters."""
        return (
            f"{self.backend}_c{self.chunk_size}_{self.image_size}_"
            f"{format_complex(self.upper_left)}_{format_complex(self.lower_right)}"
        )

    def to_dict(self) -> dict:
        """Flatten to plain scalars for MLflow logging."""
        data = asdict(self)
        data["upper_left"] = format_complex(self.upper_left)
        data["lower_right"] = format_complex(self.lower_right)
        return data

    def to_cli_args(self) -> List[str]:
        """Convert config to ``mandelraster render`` arguments."""
        return [
            "render",
            f"--backend={self.backend}",
            f"--chunk-size={self.chunk_size}",
            "--",
            self.output,
            self.image_size,
            format_complex(self.upper_left),
            format_complex(self.lower_right),
        ]


DEFAULT_RENDER_CONFIG = RenderConfig(
    width=1000,
    height=750,
    upper_left=complex(-1.20, 0.35),
    lower_right=complex(-1.0, 0.20),
    output="mandel.png",
)


def format_complex(value: complex) -> str:
    """Inverse of :func:`parse_complex`."""
    return f"{value.real!r},{value.imag!r}"


def default_render_config(**overrides: object) -> RenderConfig:
    """Return the canonical default config optionally overridden with kwargs."""
    return replace(DEFAULT_RENDER_CONFIG, **_coerce_fields(overrides))


def load_sweep_configs(yaml_path: str | Path) -> List[RenderConfig]:
    """Load YAML config and generate all parameter sweep combinations.

    Supports a top-level ``sweep`` as well as the grouped format that nests
    several experiments under ``experiments``.
    """
    cfg = _read_yaml(yaml_path)

    global_defaults: Dict[str, object] = cfg.get("defaults", {}) or {}

    if "experiments" in cfg:
        configs: List[RenderConfig] = []
        for exp in cfg.get("experiments") or []:
            exp_defaults = {**global_defaults, **(exp.get("defaults", {}) or {})}
            configs.extend(_expand_sweep(exp_defaults, exp.get("sweep") or {}))
        return configs

    sweep: Dict[str, object] = cfg.get("sweep", {}) or {}
    return _expand_sweep(global_defaults, sweep)


def get_config_by_index(yaml_path: str | Path, index: int) -> RenderConfig:
    """Get a specific config by index from sweep."""
    configs = load_sweep_configs(yaml_path)
    if index < 0 or index >= len(configs):
        raise ValueError(f"Config index {index} out of range [0, {len(configs) - 1}]")
    return configs[index]


def load_named_sweep_configs(
    yaml_path: str | Path,
    suite: str | None = None,
) -> List[tuple[str, List[RenderConfig]]]:
    cfg = _read_yaml(yaml_path)

    defaults: Dict[str, object] = cfg.get("defaults", {}) or {}
    experiments = cfg.get("experiments")
    results: List[tuple[str, List[RenderConfig]]] = []

    if experiments:
        for exp in experiments:
            name = exp.get("name")
            if not name:
                continue
            if suite and name != suite:
                continue
            exp_defaults = {**defaults, **(exp.get("defaults", {}) or {})}
            results.append((name, _expand_sweep(exp_defaults, exp.get("sweep") or {})))
        if suite and not results:
            raise ValueError(f"Suite '{suite}' not found in {yaml_path}")
        return results

    if suite:
        raise ValueError(f"Suite '{suite}' not found in {yaml_path}")
    sweep: Dict[str, object] = cfg.get("sweep", {}) or {}
    label = cfg.get("name") or Path(yaml_path).stem
    return [(label, _expand_sweep(defaults, sweep))]


def _read_yaml(yaml_path: str | Path) -> Dict[str, object]:
    with open(yaml_path) as f:
        return yaml.safe_load(f) or {}


def _expand_sweep(defaults: Dict[str, object], sweep: Dict[str, object]) -> List[RenderConfig]:
    """Expand sweep definition into RenderConfig instances."""
    configs: List[RenderConfig] = []

    windows = sweep.get("windows")
    param_grid = {k: sweep[k] for k in sweep if k not in {"windows", "image_shape"}}
    shape_options = sweep.get("image_shape")
    keys = list(param_grid.keys())

    for window in windows or [None]:
        for combo in product(*[_as_list(param_grid[k]) for k in keys]):
            data = {**defaults, **dict(zip(keys, combo))}
            if window is not None:
                data["upper_left"], data["lower_right"] = window
            configs.extend(_expand_shapes(data, shape_options))

    return configs


def _expand_shapes(base: Dict[str, object], shape_options: object) -> List[RenderConfig]:
    if not shape_options:
        return [_build_render_config(base)]

    shapes: Iterable[Tuple[int, int]]
    if isinstance(shape_options, list):
        shapes = [_normalize_shape_entry(opt) for opt in shape_options]
    else:
        shapes = [_normalize_shape_entry(shape_options)]

    return [_build_render_config({**base, "width": w, "height": h}) for w, h in shapes]


def _build_render_config(raw_data: Dict[str, object]) -> RenderConfig:
    data = _coerce_fields(raw_data)
    return replace(DEFAULT_RENDER_CONFIG, **data)


def _coerce_fields(data: Dict[str, object]) -> Dict[str, object]:
    result = dict(data)
    for key in ("image_size", "image_shape"):
        image = result.pop(key, None)
        if image is not None:
            width, height = _normalize_shape_entry(image)
            result.setdefault("width", width)
            result.setdefault("height", height)
    for key in ("width", "height", "chunk_size"):
        if key in result:
            result[key] = int(result[key])
    for key in ("upper_left", "lower_right"):
        if key in result:
            result[key] = _normalize_point(result[key])
    if "output" in result:
        result["output"] = str(result["output"])
    return result


def _as_list(value: object) -> list:
    return value if isinstance(value, list) else [value]


def _normalize_point(entry: object) -> complex:
    if isinstance(entry, complex):
        return entry
    if isinstance(entry, (int, float)):
        return complex(entry)
    if isinstance(entry, str):
        point = parse_complex(entry)
        if point is None:
            raise ValueError(f"Could not parse complex point {entry!r}, expected 're,im'")
        return point
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return complex(float(entry[0]), float(entry[1]))
    raise ValueError(f"Unsupported complex point specification: {entry!r}")


def _normalize_shape_entry(entry: object) -> Tuple[int, int]:
    if isinstance(entry, dict):
        width = entry.get("width")
        height = entry.get("height")
        if width is None or height is None:
            raise ValueError("image_shape dict must include 'width' and 'height'")
        return int(width), int(height)
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return int(entry[0]), int(entry[1])
    if isinstance(entry, str):
        bounds = parse_bounds(entry.lower())
        if bounds is None:
            raise ValueError(f"Could not parse image size {entry!r}, expected 'WxH'")
        return bounds
    raise ValueError(f"Unsupported image shape specification: {entry!r}")
