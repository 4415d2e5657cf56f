"""
Shared fixtures: a QCoreApplication for signals/QSettings, fake collaborators
for the controller, and a scriptable stand-in for the openrgb binary.
"""
import pytest
from PyQt6.QtCore import QCoreApplication

from kbdaccent import runner as runner_mod
from kbdaccent.runner import ApplyResult
from kbdaccent.settings import QtSettingsStore, Subscription, open_settings


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def settings(qapp, tmp_path) -> QtSettingsStore:
    store = open_settings(tmp_path / "kbdaccent.ini")
    assert isinstance(store, QtSettingsStore)
    return store


class FakeAccent:
    """Host accent the test can change; subscribe() records the callback"""

    def __init__(self, name="blue"):
        self.name = name
        self.reads = 0
        self.callbacks = []
        self.cancelled = 0

    def read(self):
        self.reads += 1
        return self.name

    def subscribe(self, callback):
        self.callbacks.append(callback)

        def _cancel():
            self.callbacks.remove(callback)
            self.cancelled += 1

        return Subscription(_cancel)

    def change(self, name):
        self.name = name
        for cb in list(self.callbacks):
            cb()


class FakeRunner:
    def __init__(self):
        self.calls = []

    def apply(self, hex_color, effect):
        self.calls.append((hex_color, effect))
        return ApplyResult(ok=True, path="profile")


@pytest.fixture
def accent():
    return FakeAccent("teal")


@pytest.fixture
def fake_runner():
    return FakeRunner()


class FakePopen:
    def __init__(self, argv, returncode=0):
        self.argv = argv
        self.pid = 4242
        self.returncode = returncode

    def wait(self, timeout=None):
        return self.returncode


class FakeCompleted:
    def __init__(self, returncode=0, stdout="", stderr=""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class FakeTool:
    """
    Replaces shutil.which / subprocess.run / subprocess.Popen inside the runner.
    run_result: int exit code, an exception instance to raise, or FakeCompleted
    """

    def __init__(self, monkeypatch):
        self.path = "/usr/bin/openrgb"
        self.run_result = 0
        self.run_stdout = ""
        self.popen_error = None
        self.popen_returncode = 0
        self.run_calls = []
        self.popen_calls = []
        monkeypatch.setattr(runner_mod.shutil, "which", self._which)
        monkeypatch.setattr(runner_mod.subprocess, "run", self._run)
        monkeypatch.setattr(runner_mod.subprocess, "Popen", self._popen)

    def _which(self, name):
        return self.path

    def _run(self, argv, **kwargs):
        self.run_calls.append(list(argv))
        if isinstance(self.run_result, BaseException):
            raise self.run_result
        if isinstance(self.run_result, FakeCompleted):
            return self.run_result
        return FakeCompleted(self.run_result, self.run_stdout, "profile not found" if self.run_result else "")

    def _popen(self, argv, **kwargs):
        self.popen_calls.append(list(argv))
        if self.popen_error is not None:
            raise self.popen_error
        return FakePopen(argv, self.popen_returncode)


@pytest.fixture
def fake_tool(monkeypatch):
    return FakeTool(monkeypatch)
