"""
Frame renderer: turns a viewport snapshot into a packed pixel buffer.

The buffer is a flat numpy uint32 array of length width * height in
row-major order, one 0xRRGGBB value per pixel. Every frame is computed
from scratch; nothing is cached between frames.
"""

import logging
import time

import numpy as np

from .compute import clamp_zoom, compute_iterations, pixel_scale
from .colormaps import (
    apply_colormap,
    get_colormap,
    list_colormap_names,
    snap_hue_step,
    DEFAULT_HUE_STEP,
    DEFAULT_PALETTE,
)


logger = logging.getLogger(__name__)


def render(width, height, center, zoom, max_iterations, escape_radius=2.0,
           palette=DEFAULT_PALETTE, hue_step=DEFAULT_HUE_STEP):
    """
    Render one frame of the Mandelbrot set.

    Args:
        width, height: Frame size in pixels (0 gives an empty buffer)
        center: (real, imaginary) coordinate at the middle of the frame
        zoom: Magnification; the shorter axis spans VIEW_SPAN / zoom.
            Values at or below MIN_ZOOM (and NaN) are clamped to MIN_ZOOM
        max_iterations: Escape-time cutoff
        escape_radius: Escape threshold (default 2.0)
        palette: Name of a palette in COLORMAPS
        hue_step: Degrees of hue per iteration for the rainbow palette,
            snapped to a whole-degree divisor of 360

    Returns:
        1D uint32 array, pixel (px, py) at index py * width + px.
    """
    width = int(width)
    height = int(height)
    out = np.zeros(width * height, dtype=np.uint32)
    if width <= 0 or height <= 0:
        return out

    unit = pixel_scale(width, height, clamp_zoom(zoom))
    iterations = compute_iterations(
        float(center[0]), float(center[1]), unit,
        width, height, int(max_iterations), float(escape_radius)
    )
    apply_colormap(iterations.ravel(), int(max_iterations),
                   get_colormap(palette), snap_hue_step(hue_step), out)
    return out


class MandelbrotRenderer:
    """
    Renders viewport snapshots at a fixed size with a fixed configuration.

    Usage:
        renderer = MandelbrotRenderer(800, 600, max_iter=1000)
        buffer = renderer.render_frame(controller.snapshot())

    Attributes:
        width, height: Display dimensions
        max_iter: Maximum iteration count
        escape_radius: Escape threshold
        palette: Palette name
        hue_step: Rainbow hue advance per iteration
        last_render_ms: Wall time of the most recent render
    """

    def __init__(self, width, height, max_iter, escape_radius=2.0,
                 palette=DEFAULT_PALETTE, hue_step=DEFAULT_HUE_STEP):
        self.width = width
        self.height = height
        self.max_iter = max_iter
        self.escape_radius = escape_radius
        self.palette = palette
        self.hue_step = snap_hue_step(hue_step)
        self.last_render_ms = 0.0

    @classmethod
    def from_settings(cls, settings):
        return cls(settings.width, settings.height, settings.max_iterations,
                   escape_radius=settings.escape_radius,
                   palette=settings.palette, hue_step=settings.hue_step)

    def render_frame(self, viewport):
        """Render the given Viewport snapshot and return the pixel buffer."""
        start = time.perf_counter()
        buffer = render(
            self.width, self.height, viewport.center, viewport.zoom,
            self.max_iter, escape_radius=self.escape_radius,
            palette=self.palette, hue_step=self.hue_step
        )
        self.last_render_ms = (time.perf_counter() - start) * 1000.0
        logger.debug("Rendered %dx%d at center=(%.17g, %.17g) zoom=%g in %.1f ms",
                     self.width, self.height, viewport.center_x, viewport.center_y,
                     viewport.zoom, self.last_render_ms)
        return buffer

    def update_settings(self, max_iter=None, palette=None, hue_step=None, escape_radius=None):
        """
        Update rendering settings.

        Args:
            max_iter: New maximum iteration count (or None to keep current)
            palette: New palette name (or None to keep current)
            hue_step: New rainbow hue step (or None to keep current)
            escape_radius: New escape threshold (or None to keep current)

        Returns:
            True if any setting changed, False otherwise

        Raises:
            KeyError if palette is not a known palette name
        """
        changed = False
        if max_iter is not None and max(1, int(max_iter)) != self.max_iter:
            self.max_iter = max(1, int(max_iter))
            changed = True
        if palette is not None and palette != self.palette:
            get_colormap(palette)
            self.palette = palette
            changed = True
        if hue_step is not None and snap_hue_step(hue_step) != self.hue_step:
            self.hue_step = snap_hue_step(hue_step)
            changed = True
        if escape_radius is not None and escape_radius != self.escape_radius:
            self.escape_radius = escape_radius
            changed = True
        return changed

    def cycle_palette(self):
        """Switch to the next palette in the registry; returns its name."""
        names = list_colormap_names()
        index = (names.index(self.palette) + 1) % len(names) if self.palette in names else 0
        self.update_settings(palette=names[index])
        return self.palette
