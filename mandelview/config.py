"""
Settings for the viewer: defaults, the optional settings.json file, and
clamping of out-of-range values.

Invalid values are clamped (with a warning) when the settings are built,
never discovered in the middle of a render.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Optional

from .colormaps import COLORMAPS, DEFAULT_PALETTE, snap_hue_step
from .compute import MIN_ZOOM
from .viewport import Viewport


logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')


class ConfigError(ValueError):
    """Raised when a settings file exists but cannot be parsed."""


INT_FIELDS = ('width', 'height', 'max_iterations', 'max_fps')
STR_FIELDS = ('palette',)
OPTIONAL_INT_FIELDS = ('threads',)


@dataclass(frozen=True)
class Settings:
    """Everything needed to start the viewer."""

    width: int = 800
    height: int = 600
    max_iterations: int = 1000
    escape_radius: float = 2.0
    center_x: float = -0.5
    center_y: float = 0.0
    zoom: float = 1.0
    palette: str = DEFAULT_PALETTE
    hue_step: float = 10.0
    pan_step: float = 0.2
    zoom_factor: float = 1.1
    wheel_zoom_factor: float = 1.2
    max_fps: int = 60
    threads: Optional[int] = None

    def initial_viewport(self) -> Viewport:
        return Viewport(self.center_x, self.center_y, self.zoom)

    def validated(self) -> "Settings":
        """Return a copy with every value clamped into its safe range."""
        changes = {}

        def clamp(name, value, minimum):
            if not value >= minimum:
                logger.warning("%s=%r out of range, using %r", name, value, minimum)
                changes[name] = minimum

        clamp('width', self.width, 1)
        clamp('height', self.height, 1)
        clamp('max_iterations', self.max_iterations, 1)
        clamp('zoom', self.zoom, MIN_ZOOM)
        clamp('max_fps', self.max_fps, 1)

        if not self.escape_radius > 0:
            logger.warning("escape_radius=%r must be positive, using 2.0", self.escape_radius)
            changes['escape_radius'] = 2.0
        hue_step = snap_hue_step(self.hue_step)
        if hue_step != self.hue_step:
            logger.warning("hue_step=%r is not a whole-degree divisor of 360, using %r",
                           self.hue_step, hue_step)
            changes['hue_step'] = hue_step
        if not self.pan_step > 0:
            logger.warning("pan_step=%r must be positive, using 0.2", self.pan_step)
            changes['pan_step'] = 0.2
        if not self.zoom_factor > 1:
            logger.warning("zoom_factor=%r must be above 1, using 1.1", self.zoom_factor)
            changes['zoom_factor'] = 1.1
        if not self.wheel_zoom_factor > 1:
            logger.warning("wheel_zoom_factor=%r must be above 1, using 1.2", self.wheel_zoom_factor)
            changes['wheel_zoom_factor'] = 1.2
        if self.palette not in COLORMAPS:
            logger.warning("Unknown palette %r, using %r", self.palette, DEFAULT_PALETTE)
            changes['palette'] = DEFAULT_PALETTE
        if self.threads is not None and self.threads < 0:
            logger.warning("threads=%r is negative, using the default", self.threads)
            changes['threads'] = None

        return replace(self, **changes) if changes else self


def load_settings(path=None):
    """
    Load settings overrides from a JSON file.

    A missing file is not an error (returns {}); the default path is
    settings.json next to this package. Keys that are not Settings fields
    are ignored.

    Numbers may be given as JSON numbers or numeric strings; "threads"
    may also be null.

    Raises:
        ConfigError if the file exists but is not a JSON object, or a
        value cannot be converted to its setting's type
    """
    settings_path = path or DEFAULT_SETTINGS_PATH
    try:
        with open(settings_path, 'r') as f:
            data = json.load(f)
    except FileNotFoundError:
        if path is not None:
            logger.warning("Settings file %s not found, using defaults", settings_path)
        else:
            logger.info("No settings file at %s, using defaults", settings_path)
        return {}
    except json.JSONDecodeError as e:
        raise ConfigError(f"Could not parse {settings_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{settings_path} must contain a JSON object")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown settings in %s: %s", settings_path, ", ".join(unknown))
    return {k: _coerce(settings_path, k, v) for k, v in data.items() if k in known}


def _coerce(settings_path, name, value):
    """Convert one settings file value to its field's type."""
    if name in OPTIONAL_INT_FIELDS and value is None:
        return None
    if name in STR_FIELDS:
        if isinstance(value, str):
            return value
    elif value is not None and not isinstance(value, (bool, list, dict)):
        convert = int if name in INT_FIELDS + OPTIONAL_INT_FIELDS else float
        try:
            return convert(value)
        except (TypeError, ValueError, OverflowError):
            pass
    raise ConfigError(f"{settings_path}: invalid value {value!r} for {name!r}")


def build_settings(file_values=None, overrides=None):
    """
    Merge defaults, file values and command line overrides, then clamp.

    Later sources win; None in overrides means "not given".
    """
    values = dict(file_values or {})
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return Settings(**values).validated()
