import pytest

from mandelview import app as app_module
from mandelview import cli
from mandelview.app import DisplayError


@pytest.fixture
def captured(monkeypatch):
    seen = {}

    def fake_run(settings):
        seen['settings'] = settings

    monkeypatch.setattr(app_module, "run", fake_run)
    return seen


def test_arguments_reach_settings(captured, tmp_path):
    config = tmp_path / "settings.json"
    config.write_text('{"width": 640, "max_iterations": 250}')
    status = cli.main(["--config", str(config), "--width", "320",
                       "--zoom", "4", "--palette", "mono"])
    assert status == 0
    settings = captured['settings']
    assert settings.width == 320
    assert settings.max_iterations == 250
    assert settings.zoom == 4.0
    assert settings.palette == 'mono'


def test_invalid_arguments_are_clamped(captured, tmp_path):
    status = cli.main(["--config", str(tmp_path / "none.json"),
                       "--width", "0", "--max-iterations", "0", "--zoom", "-1"])
    assert status == 0
    settings = captured['settings']
    assert settings.width == 1
    assert settings.max_iterations == 1
    assert settings.zoom > 0


def test_bad_config_exits_2(captured, tmp_path):
    config = tmp_path / "settings.json"
    config.write_text("{oops")
    assert cli.main(["--config", str(config)]) == 2
    assert 'settings' not in captured


def test_display_error_exits_1(monkeypatch, tmp_path):
    def fail(settings):
        raise DisplayError("no display")

    monkeypatch.setattr(app_module, "run", fail)
    assert cli.main(["--config", str(tmp_path / "none.json")]) == 1


def test_unknown_palette_is_rejected():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--palette", "sepia"])


@pytest.mark.parametrize("content", ['{"width": "800px"}', '{"threads": "4 cores"}'])
def test_wrongly_typed_config_exits_2(captured, tmp_path, content):
    config = tmp_path / "settings.json"
    config.write_text(content)
    assert cli.main(["--config", str(config)]) == 2
    assert 'settings' not in captured


def test_numeric_strings_in_config_are_accepted(captured, tmp_path):
    config = tmp_path / "settings.json"
    config.write_text('{"width": "800", "threads": "4"}')
    assert cli.main(["--config", str(config)]) == 0
    assert captured['settings'].width == 800
    assert captured['settings'].threads == 4
