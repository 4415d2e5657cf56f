import logging
import os
import time
from subprocess import CalledProcessError

import pytest
from PyQt6.QtCore import QEventLoop, QProcess

from kbdaccent import accent as accent_mod
from kbdaccent.accent import GnomeAccentSource, StaticAccentSource, parse_gsettings_value


@pytest.mark.parametrize("raw,expected", [
    ("'teal'\n", "teal"),
    ("accent-color: 'purple'", "purple"),
    ("'Blue'", "blue"),
    ("@ms nothing", ""),
    ("", ""),
])
def test_parse_gsettings_value(raw, expected):
    assert parse_gsettings_value(raw) == expected


def test_gnome_read(monkeypatch):
    seen = []

    def fake_check_output(argv, **kwargs):
        seen.append(argv)
        return "'orange'\n"

    monkeypatch.setattr(accent_mod, "check_output", fake_check_output)
    assert GnomeAccentSource().read() == "orange"
    assert seen == [["gsettings", "get", "org.gnome.desktop.interface", "accent-color"]]


def test_gnome_read_failure_is_empty(monkeypatch):
    def boom(argv, **kwargs):
        raise CalledProcessError(1, argv)

    monkeypatch.setattr(accent_mod, "check_output", boom)
    assert GnomeAccentSource().read() == ""


def test_static_source():
    src = StaticAccentSource("sage")
    assert src.read() == "sage"
    sub = src.subscribe(lambda: None)
    assert not sub.active


def _fake_gsettings(tmp_path):
    script = tmp_path / "gsettings"
    script.write_text(
        "#!/bin/sh\n"
        "echo \"accent-color: 'teal'\"\n"
        "echo \"accent-color: 'red'\"\n"
        "exec sleep 30\n"
    )
    script.chmod(0o755)
    return str(script)


def _spin(app, done, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not done() and time.monotonic() < deadline:
        app.processEvents(QEventLoop.ProcessEventsFlag.AllEvents, 50)


@pytest.mark.skipif(os.name != "posix", reason="needs a shell script as fake gsettings")
def test_monitor_calls_back_per_line_and_cancel_kills(qapp, tmp_path, caplog):
    source = GnomeAccentSource(gsettings=_fake_gsettings(tmp_path))
    fired = []
    sub = source.subscribe(lambda: fired.append(1))
    proc = source.monitor
    assert proc is not None

    _spin(qapp, lambda: len(fired) >= 2)
    assert fired == [1, 1]
    assert proc.state() != QProcess.ProcessState.NotRunning

    with caplog.at_level(logging.INFO, logger="kbdaccent"):
        sub.cancel()
        _spin(qapp, lambda: False, timeout=0.3)

    assert proc.state() == QProcess.ProcessState.NotRunning
    assert source.monitor is None
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert "listener stopped" in caplog.text
