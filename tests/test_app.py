import pytest

from kbdaccent import app as app_mod
from kbdaccent.app import build_parser, handle_cli, resolve_color
from kbdaccent.errors import InvalidInput, ToolUnavailable


class ListingRunner:
    def __init__(self, devices=None, error=None):
        self.devices = devices or []
        self.error = error

    def list_devices(self):
        if self.error:
            raise self.error
        return self.devices


def run(argv, runner):
    return handle_cli(build_parser().parse_args(argv), runner)


def test_resolve_color():
    assert resolve_color("teal") == "#2ec27e"
    assert resolve_color("f0a") == "#ff00aa"
    with pytest.raises(InvalidInput):
        resolve_color("xyz")


def test_color_and_mode(fake_runner):
    assert run(["--color", "red", "--mode", "breathing"], fake_runner) == 0
    assert fake_runner.calls == [("#c01c28", "breathing")]


def test_bad_color_is_usage_error(fake_runner, capsys):
    assert run(["--color", "xyz"], fake_runner) == 2
    assert fake_runner.calls == []
    assert "not a hex color" in capsys.readouterr().err


def test_accent_fallback(fake_runner):
    assert run(["--accent", "unknown-color"], fake_runner) == 0
    assert fake_runner.calls == [("#3584e4", None)]


def test_list_devices(capsys):
    assert run(["--list-devices"], ListingRunner([(0, "ASUS Aura Keyboard")])) == 0
    assert "0: ASUS Aura Keyboard" in capsys.readouterr().out


def test_list_devices_without_tool(capsys):
    assert run(["--list-devices"], ListingRunner(error=ToolUnavailable("openrgb"))) == 1
    assert "openrgb" in capsys.readouterr().err


def test_mode_only_uses_host_accent(fake_runner, monkeypatch):
    reads = []

    class HostAccent:
        def read(self):
            reads.append(1)
            return "'sage'"

    monkeypatch.setattr(app_mod, "GnomeAccentSource", HostAccent)
    assert run(["--mode", "wave"], fake_runner) == 0
    assert reads == [1]
    assert fake_runner.calls == [("#718862", "wave")]


def test_accent_flag_reads_static_source(fake_runner, monkeypatch):
    built = []
    real = app_mod.StaticAccentSource

    def recording(name):
        built.append(name)
        return real(name)

    monkeypatch.setattr(app_mod, "StaticAccentSource", recording)
    assert run(["--accent", "plum"], fake_runner) == 0
    assert built == ["plum"]
    assert fake_runner.calls == [("#7c154d", None)]


def test_settings_flag_reaches_tray(tmp_path, monkeypatch):
    seen = []
    monkeypatch.setattr(app_mod, "setup_logging", lambda verbose=False: None)
    monkeypatch.setattr(app_mod, "run_tray", lambda path=None: seen.append(path) or 0)
    ini = str(tmp_path / "alt.ini")
    assert app_mod.main(["--settings", ini]) == 0
    assert app_mod.main([]) == 0
    assert seen == [ini, None]
