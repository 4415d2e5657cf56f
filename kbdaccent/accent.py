"""
Host accent color source (GNOME: org.gnome.desktop.interface accent-color)
read() is synchronous; subscribe() follows `gsettings monitor` through a QProcess
"""

import logging
import shlex
from subprocess import DEVNULL, CalledProcessError, check_output
from typing import Callable, Optional

from PyQt6.QtCore import QProcess

from .settings import Subscription

logger = logging.getLogger("kbdaccent")

SCHEMA = "org.gnome.desktop.interface"
ACCENT_KEY = "accent-color"


def parse_gsettings_value(raw: str) -> str:
    """
    "'teal'" -> "teal", "accent-color: 'teal'" -> "teal"
    Empty string for unset/unparsable values
    """
    value = (raw or "").strip()
    if ":" in value:
        value = value.split(":", 1)[1].strip()
    if value.startswith("@") or value in ("", "()"):
        return ""
    return value.strip("'\"").strip().lower()


class AccentSource:
    def read(self) -> str:
        raise NotImplementedError

    def subscribe(self, callback: Callable[[], None]) -> Subscription:
        raise NotImplementedError


class GnomeAccentSource(AccentSource):
    def __init__(self, gsettings: str = "gsettings"):
        self.gsettings = gsettings
        self.monitor: Optional[QProcess] = None

    def read(self) -> str:
        cmd = f"{self.gsettings} get {SCHEMA} {ACCENT_KEY}"
        try:
            out = check_output(shlex.split(cmd), text=True, stderr=DEVNULL)
        except (CalledProcessError, OSError) as e:
            logger.warning(f"Could not read accent color ({cmd}): {e}")
            return ""
        name = parse_gsettings_value(out)
        logger.debug(f"Host accent color: {name or '<unset>'}")
        return name

    def subscribe(self, callback: Callable[[], None]) -> Subscription:
        proc = QProcess()
        proc.setProcessChannelMode(QProcess.ProcessChannelMode.MergedChannels)

        def _on_output():
            while proc.canReadLine():
                line = bytes(proc.readLine()).decode("utf-8", "replace").strip()
                if line:
                    logger.debug(f"gsettings monitor: {line}")
                    callback()

        def _on_error(err):
            logger.error(f"Accent monitor error: {err}")

        proc.readyReadStandardOutput.connect(_on_output)
        proc.errorOccurred.connect(_on_error)
        proc.start(self.gsettings, ["monitor", SCHEMA, ACCENT_KEY])
        self.monitor = proc
        logger.info("System accent color listener set up")

        def _stop():
            proc.readyReadStandardOutput.disconnect(_on_output)
            # kill() reports Crashed; that is expected here
            proc.errorOccurred.disconnect(_on_error)
            if proc.state() != QProcess.ProcessState.NotRunning:
                proc.kill()
                proc.waitForFinished(1000)
            if self.monitor is proc:
                self.monitor = None
            logger.info("System accent color listener stopped")

        return Subscription(_stop)


class StaticAccentSource(AccentSource):
    """Fixed accent name; used by the one-shot CLI"""

    def __init__(self, name: str):
        self.name = name

    def read(self) -> str:
        return self.name

    def subscribe(self, callback: Callable[[], None]) -> Subscription:
        return Subscription()
