"""
Viewport state and the controller that mutates it in response to input.

The controller is the only writer. Every mutation replaces the current
Viewport with a new frozen value, so whatever the renderer was handed for
a frame cannot change underneath it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from .compute import MIN_ZOOM, pixel_scale


logger = logging.getLogger(__name__)

DEFAULT_CENTER = (-0.5, 0.0)
DEFAULT_ZOOM = 1.0


@dataclass(frozen=True)
class Viewport:
    """Center of the view in the complex plane plus a magnification factor."""

    center_x: float = DEFAULT_CENTER[0]
    center_y: float = DEFAULT_CENTER[1]
    zoom: float = DEFAULT_ZOOM

    def __post_init__(self):
        if not self.zoom > MIN_ZOOM:
            object.__setattr__(self, "zoom", MIN_ZOOM)

    @property
    def center(self) -> tuple[float, float]:
        return (self.center_x, self.center_y)


class ViewportController:
    """
    Owns the current Viewport and applies navigation input to it.

    Every mutating method returns True when the viewport changed, which
    tells the caller to schedule one render.

    Attributes:
        pan_step: Complex-plane distance moved per pan at zoom 1.0
        zoom_factor: Multiplier for keyboard zoom in/out
        wheel_zoom_factor: Multiplier for one mouse wheel notch
    """

    def __init__(self, initial: Viewport | None = None, pan_step: float = 0.2,
                 zoom_factor: float = 1.1, wheel_zoom_factor: float = 1.2):
        self.initial = initial or Viewport()
        self.viewport = self.initial
        self.pan_step = pan_step
        self.zoom_factor = zoom_factor
        self.wheel_zoom_factor = wheel_zoom_factor

    def snapshot(self) -> Viewport:
        return self.viewport

    def _set(self, viewport: Viewport) -> bool:
        changed = viewport != self.viewport
        self.viewport = viewport
        return changed

    def pan(self, dx: float, dy: float) -> bool:
        """
        Shift the center by (dx, dy) pan steps.

        The shift is pan_step / zoom, so a pan covers the same share of
        the screen at every zoom level.
        """
        step = self.pan_step / self.viewport.zoom
        return self._set(replace(
            self.viewport,
            center_x=self.viewport.center_x + dx * step,
            center_y=self.viewport.center_y + dy * step,
        ))

    def drag(self, dx_pixels: float, dy_pixels: float, width: int, height: int) -> bool:
        """Move the view so the content follows a pointer drag of (dx, dy) pixels."""
        unit = pixel_scale(width, height, self.viewport.zoom)
        return self._set(replace(
            self.viewport,
            center_x=self.viewport.center_x - dx_pixels * unit,
            center_y=self.viewport.center_y - dy_pixels * unit,
        ))

    def _factor(self, factor: float | None) -> float | None:
        if factor is None:
            return self.zoom_factor
        if not factor > 1:
            logger.warning("Ignoring zoom factor %r, must be above 1", factor)
            return None
        return factor

    def zoom_in(self, factor: float | None = None) -> bool:
        factor = self._factor(factor)
        if factor is None:
            return False
        return self._set(replace(self.viewport, zoom=self.viewport.zoom * factor))

    def zoom_out(self, factor: float | None = None) -> bool:
        factor = self._factor(factor)
        if factor is None:
            return False
        zoom = max(self.viewport.zoom / factor, MIN_ZOOM)
        return self._set(replace(self.viewport, zoom=zoom))

    def zoom_at(self, px: float, py: float, width: int, height: int,
                zoom_in: bool = True) -> bool:
        """
        Wheel zoom anchored at pixel (px, py).

        The complex point under the cursor stays under the cursor.
        """
        old = self.viewport
        factor = self.wheel_zoom_factor if zoom_in else 1.0 / self.wheel_zoom_factor
        zoom = max(old.zoom * factor, MIN_ZOOM)

        old_unit = pixel_scale(width, height, old.zoom)
        new_unit = pixel_scale(width, height, zoom)
        off_x = px - width / 2.0
        off_y = py - height / 2.0
        return self._set(Viewport(
            center_x=old.center_x + off_x * (old_unit - new_unit),
            center_y=old.center_y + off_y * (old_unit - new_unit),
            zoom=zoom,
        ))

    def reset(self) -> bool:
        logger.info("Resetting view to center=(%g, %g) zoom=%g",
                    self.initial.center_x, self.initial.center_y, self.initial.zoom)
        return self._set(self.initial)
