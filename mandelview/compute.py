"""
Escape-time computation functions using Numba JIT compilation.

This module contains the performance-critical parts of the viewer:
- The scalar escape-time kernel for a single point c
- The pixel -> complex plane mapping shared by the renderer and controller
- The row-parallel frame kernel producing raw iteration counts

Iteration counts follow one convention everywhere: the value returned is
the index of the step on which |z| first exceeded the escape radius, or
max_iter if it never did. A point with |c| > escape_radius escapes on the
very first step and therefore returns 0.
"""

import logging

import numpy as np
from numba import jit, prange
import numba

from .colormaps import apply_colormap, PALETTE_IDS


logger = logging.getLogger(__name__)

# Width of the complex plane shown along the shorter screen axis at zoom 1.0
VIEW_SPAN = 3.5

# Zoom never drops below this; keeps the pixel scale finite and positive
MIN_ZOOM = 1e-6


@jit(nopython=True, cache=True)
def escape_time(cr, ci, max_iter, escape_r2):
    """
    Iterate z = z² + c from z = 0 until escape or max_iter.

    Args:
        cr, ci: Real and imaginary parts of c
        max_iter: Iteration cutoff
        escape_r2: Squared escape radius

    Returns:
        Step index of escape, or max_iter if the point never escaped.
    """
    zr = 0.0
    zi = 0.0
    for i in range(max_iter):
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        if zr * zr + zi * zi > escape_r2:
            return i
    return max_iter


def evaluate(c, max_iterations, escape_radius=2.0):
    """
    Escape-time count for a single point of the complex plane.

    Args:
        c: A complex number or a (real, imaginary) pair
        max_iterations: Iteration cutoff
        escape_radius: |z| threshold beyond which the point has escaped

    Returns:
        int in 0..max_iterations; max_iterations means inside the set.
    """
    if isinstance(c, tuple):
        c = complex(c[0], c[1])
    else:
        c = complex(c)
    r2 = float(escape_radius) * float(escape_radius)
    return int(escape_time(c.real, c.imag, int(max_iterations), r2))


def clamp_zoom(zoom):
    """Zoom as a float no smaller than MIN_ZOOM; NaN maps to MIN_ZOOM."""
    zoom = float(zoom)
    return zoom if zoom > MIN_ZOOM else MIN_ZOOM


def pixel_scale(width, height, zoom, view_span=VIEW_SPAN):
    """Complex-plane distance between two adjacent pixels (same on both axes)."""
    return view_span / (zoom * max(min(width, height), 1))


def pixel_to_complex(px, py, width, height, center, zoom, view_span=VIEW_SPAN):
    """Map pixel (px, py) to its complex coordinate for the given view."""
    unit = pixel_scale(width, height, zoom, view_span)
    return complex(center[0] + (px - width / 2.0) * unit,
                   center[1] + (py - height / 2.0) * unit)


@jit(nopython=True, parallel=True, cache=True)
def compute_iterations(center_x, center_y, unit, width, height, max_iter,
                       escape_radius=2.0):
    """
    Compute escape-time counts for every pixel of a frame.

    Rows are distributed across threads with prange; each row writes
    only its own slice of the result.

    Args:
        center_x, center_y: Complex coordinate at the middle of the frame
        unit: Complex distance per pixel (see pixel_scale)
        width, height: Frame dimensions in pixels
        max_iter: Maximum iteration count before assuming point is in set
        escape_radius: Escape threshold (default 2.0)

    Returns:
        2D int32 array of shape (height, width).
    """
    result = np.empty((height, width), dtype=np.int32)
    escape_r2 = escape_radius * escape_radius
    half_w = width / 2.0
    half_h = height / 2.0

    for py in prange(height):
        ci = center_y + (py - half_h) * unit
        for px in range(width):
            cr = center_x + (px - half_w) * unit
            result[py, px] = escape_time(cr, ci, max_iter, escape_r2)

    return result


def set_thread_count(threads):
    """
    Limit the number of worker threads used by compute_iterations.

    None or 0 keeps Numba's default (one per core). Values above the
    available thread count are clamped.
    """
    if not threads:
        return numba.get_num_threads()
    available = numba.config.NUMBA_NUM_THREADS
    count = max(1, min(int(threads), available))
    if count != threads:
        logger.warning("Requested %s threads, using %s", threads, count)
    numba.set_num_threads(count)
    return count


def warmup_jit():
    """
    Warm up JIT compilation with a tiny frame.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on the first interactive render.
    """
    data = compute_iterations(-0.5, 0.0, 0.5, 8, 8, 10)
    out = np.empty(64, dtype=np.uint32)
    for palette_id in PALETTE_IDS.values():
        apply_colormap(data.ravel(), 10, palette_id, 10.0, out)
