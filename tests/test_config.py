import json
import logging

import pytest

from mandelview import config
from mandelview.config import ConfigError, Settings, build_settings, load_settings
from mandelview.viewport import MIN_ZOOM, Viewport


def test_defaults_are_valid():
    settings = Settings()
    assert settings.validated() is settings
    assert settings.initial_viewport() == Viewport(-0.5, 0.0, 1.0)


def test_invalid_values_are_clamped(caplog):
    with caplog.at_level(logging.WARNING):
        settings = Settings(width=0, height=-5, max_iterations=0, zoom=0.0,
                            max_fps=0).validated()
    assert (settings.width, settings.height) == (1, 1)
    assert settings.max_iterations == 1
    assert settings.zoom == MIN_ZOOM
    assert settings.max_fps == 1
    assert "width=0 out of range" in caplog.text


def test_invalid_factors_and_palette_fall_back():
    settings = Settings(escape_radius=-1.0, hue_step=0.0, pan_step=0.0,
                        zoom_factor=0.5, wheel_zoom_factor=1.0,
                        palette='sepia', threads=-2).validated()
    assert settings.escape_radius == 2.0
    assert settings.hue_step == 10.0
    assert settings.pan_step == 0.2
    assert settings.zoom_factor == 1.1
    assert settings.wheel_zoom_factor == 1.2
    assert settings.palette == 'rainbow'
    assert settings.threads is None


def test_load_settings_missing_file(tmp_path):
    assert load_settings(str(tmp_path / "missing.json")) == {}


def test_load_settings_ignores_unknown_keys(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"width": 640, "palette": "mono", "colour": "red"}))
    assert load_settings(str(path)) == {"width": 640, "palette": "mono"}


def test_load_settings_rejects_bad_json(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError):
        load_settings(str(path))


def test_load_settings_rejects_non_object(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(ConfigError):
        load_settings(str(path))


def test_bundled_settings_file_loads():
    values = load_settings()
    assert set(values) <= {f for f in Settings.__dataclass_fields__}
    assert Settings(**values).validated() == Settings(**values)


def test_build_settings_precedence():
    settings = build_settings({"width": 640, "height": 480},
                              {"width": 320, "height": None, "zoom": 4.0})
    assert settings.width == 320
    assert settings.height == 480
    assert settings.zoom == 4.0
    assert settings.max_iterations == Settings().max_iterations


def test_build_settings_clamps():
    assert build_settings(None, {"max_iterations": -10}).max_iterations == 1


def test_load_settings_converts_numeric_strings(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"width": "640", "zoom": "2.5", "threads": None,
                                "max_fps": 30.0}))
    values = load_settings(str(path))
    assert values == {"width": 640, "zoom": 2.5, "threads": None, "max_fps": 30}
    assert isinstance(values["width"], int)


@pytest.mark.parametrize("values", [
    {"width": "wide"},
    {"threads": "four"},
    {"zoom": [1, 2]},
    {"palette": 3},
    {"max_iterations": True},
    {"height": None},
    {"hue_step": {"degrees": 10}},
])
def test_load_settings_rejects_wrong_types(tmp_path, values):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(values))
    with pytest.raises(ConfigError, match=repr(next(iter(values)))):
        load_settings(str(path))


def test_hue_step_is_snapped_to_divisor(caplog):
    with caplog.at_level(logging.WARNING):
        settings = Settings(hue_step=7.0).validated()
    assert settings.hue_step == 6.0
    assert "hue_step=7.0" in caplog.text
    assert Settings(hue_step=0.1).validated().hue_step == 1.0


def test_missing_bundled_settings_is_reported(tmp_path, monkeypatch, caplog):
    monkeypatch.setattr(config, "DEFAULT_SETTINGS_PATH", str(tmp_path / "settings.json"))
    with caplog.at_level(logging.INFO, logger="mandelview.config"):
        assert load_settings() == {}
    assert "No settings file" in caplog.text
