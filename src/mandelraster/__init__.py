"""Grayscale Mandelbrot escape-time rendering."""

__version__ = "1.0.0"

# Core renderer and config - lightweight, no compilation on import
from .baseline import escape_time, pixel_to_point, render
from .config import RenderConfig, default_render_config, load_sweep_configs
from .parsing import parse_bounds, parse_complex, parse_pair
from .report import RenderReport


# Conditional imports - only loaded when needed
def __getattr__(name):
    """Lazy loading of heavy modules."""
    if name == "run_render":
        from .execution import run_render

        return run_render
    elif name == "log_to_mlflow":
        from .tracking import log_to_mlflow

        return log_to_mlflow
    elif name == "render_compiled":
        from .computation import render as render_compiled

        return render_compiled
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "RenderConfig",
    "RenderReport",
    "default_render_config",
    "escape_time",
    "load_sweep_configs",
    "log_to_mlflow",
    "parse_bounds",
    "parse_complex",
    "parse_pair",
    "pixel_to_point",
    "render",
    "render_compiled",
    "run_render",
]
