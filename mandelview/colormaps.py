"""
Colormap definitions for Mandelbrot visualization.

Each palette turns an escape-time count into a packed 0xRRGGBB value.
Points inside the set (count == max_iter) are always black, and no palette
produces black for an escaped point.

To add a new palette:
1. Add a branch for it in palette_color()
2. Register its id in PALETTE_IDS and its description in COLORMAPS
"""

import numpy as np
from numba import jit, prange


BLACK = 0x000000
WHITE = 0xFFFFFF

# Degrees of hue advanced per iteration; 360 / HUE_STEP counts per cycle
DEFAULT_HUE_STEP = 10.0

# Usable hue steps: whole degrees dividing 360, so the bands repeat exactly
# every 360 / step counts and neighbouring hues never round to one color
HUE_STEPS = tuple(float(d) for d in range(1, 361) if 360 % d == 0)

PALETTE_RAINBOW = 0
PALETTE_MONO = 1


@jit(nopython=True, cache=True)
def pack_rgb(r, g, b):
    """Pack 8-bit channels into a 0xRRGGBB integer."""
    return (r << 16) | (g << 8) | b


@jit(nopython=True, cache=True)
def hue_to_rgb(hue):
    """
    HSV to RGB with S=1, V=1.

    Args:
        hue: Hue in degrees, [0, 360)

    Returns:
        Packed 0xRRGGBB color.
    """
    sector = int(hue // 60.0)
    up = int(255.0 * (hue / 60.0 - sector) + 0.5)
    down = 255 - up

    if sector == 0:
        return pack_rgb(255, up, 0)
    elif sector == 1:
        return pack_rgb(down, 255, 0)
    elif sector == 2:
        return pack_rgb(0, 255, up)
    elif sector == 3:
        return pack_rgb(0, down, 255)
    elif sector == 4:
        return pack_rgb(up, 0, 255)
    return pack_rgb(255, 0, down)


@jit(nopython=True, cache=True)
def palette_color(count, max_iter, palette_id, hue_step):
    """Color for one escape-time count under the given palette."""
    if count >= max_iter:
        return BLACK
    if palette_id == PALETTE_MONO:
        return WHITE
    return hue_to_rgb((count * hue_step) % 360.0)


def snap_hue_step(hue_step):
    """
    Nearest usable hue step (see HUE_STEPS); ties go to the smaller step.

    Non-positive or NaN steps fall back to DEFAULT_HUE_STEP.
    """
    hue_step = float(hue_step)
    if not hue_step > 0:
        return DEFAULT_HUE_STEP
    return min(HUE_STEPS, key=lambda step: (abs(step - hue_step), step))


def rainbow_color(count, max_iter, hue_step=DEFAULT_HUE_STEP):
    """
    Rainbow color for an escape-time count.

    Hue advances hue_step degrees per iteration and wraps at 360, so
    nearby counts get visibly different colors and the bands repeat
    every 360 / hue_step iterations.

    hue_step is snapped with snap_hue_step first.

    Returns:
        Packed 0xRRGGBB int; 0x000000 only when count == max_iter.
    """
    return int(palette_color(int(count), int(max_iter), PALETTE_RAINBOW,
                             snap_hue_step(hue_step)))


def cycle_length(hue_step=DEFAULT_HUE_STEP):
    """Number of consecutive counts before the rainbow repeats."""
    return int(round(360.0 / snap_hue_step(hue_step)))


@jit(nopython=True, parallel=True, cache=True)
def apply_colormap(iterations, max_iter, palette_id, hue_step, out):
    """
    Apply a palette to a flat array of iteration counts.

    Args:
        iterations: 1D array of escape-time counts
        max_iter: Maximum iteration value (points with this value are black)
        palette_id: One of the PALETTE_* constants
        hue_step: Degrees of hue per iteration (rainbow only)
        out: 1D uint32 output array (modified in place)
    """
    for i in prange(iterations.shape[0]):
        out[i] = palette_color(iterations[i], max_iter, palette_id, hue_step)


# Registry of all available palettes.
# Keys are the names accepted in settings and on the command line.
PALETTE_IDS = {
    'rainbow': PALETTE_RAINBOW,
    'mono': PALETTE_MONO,
}

COLORMAPS = {
    'rainbow': 'Hue cycles with the escape count',
    'mono': 'Escaped points white, the set black',
}

DEFAULT_PALETTE = 'rainbow'


def get_colormap(name):
    """
    Get a palette id by name.

    Raises:
        KeyError if name not found
    """
    return PALETTE_IDS[name]


def list_colormap_names():
    """Get list of available palette names."""
    return list(COLORMAPS.keys())


def unpack_rgb(color):
    """Split a packed color into an (r, g, b) tuple."""
    color = int(color)
    return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


def buffer_to_rgb(buffer, width, height):
    """Expand a packed uint32 frame buffer into a (height, width, 3) uint8 image."""
    frame = np.asarray(buffer, dtype=np.uint32).reshape((height, width))
    rgb = np.empty((height, width, 3), dtype=np.uint8)
    rgb[..., 0] = (frame >> 16) & 0xFF
    rgb[..., 1] = (frame >> 8) & 0xFF
    rgb[..., 2] = frame & 0xFF
    return rgb
