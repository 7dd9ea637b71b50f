"""
Mandelbrot Set Viewer Package

An interactive Mandelbrot set explorer using Pygame for display and
Numba for JIT-compiled, row-parallel escape-time computation.

Quick Start:
    from mandelview import render
    buffer = render(800, 600, (-0.5, 0.0), 1.0, 1000)

Or from command line:
    python -m mandelview

Package Structure:
    - compute.py: JIT-compiled escape-time evaluator and pixel mapping
    - colormaps.py: Iteration count -> packed RGB palettes (rainbow, mono)
    - renderer.py: Frame renderer producing width*height pixel buffers
    - viewport.py: Viewport snapshot and the controller that mutates it
    - config.py: Settings, settings.json loading and clamping
    - app.py: Pygame window and event loop
    - cli.py: Command line options and logging setup

Controls:
    - Arrows / left drag: Pan
    - +/- or scroll: Zoom in/out
    - R / right click: Reset to default view
    - P: Next palette, [ ]: Halve/double max iterations
    - ESC: Quit
"""

from .compute import evaluate, pixel_scale, pixel_to_complex
from .colormaps import COLORMAPS, get_colormap, list_colormap_names, rainbow_color
from .renderer import render, MandelbrotRenderer
from .viewport import Viewport, ViewportController
from .config import Settings, build_settings, load_settings

__version__ = "1.0.0"
__all__ = [
    "evaluate",
    "pixel_scale",
    "pixel_to_complex",
    "COLORMAPS",
    "get_colormap",
    "list_colormap_names",
    "rainbow_color",
    "render",
    "MandelbrotRenderer",
    "Viewport",
    "ViewportController",
    "Settings",
    "build_settings",
    "load_settings",
]
