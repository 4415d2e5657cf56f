"""
Settings store: get / set / subscribe
QSettings-backed when available, otherwise a null store that serves defaults
"""

import logging
from pathlib import Path
from typing import Any, Callable, Optional, Union

from PyQt6.QtCore import QObject, QSettings, pyqtSignal

from .config import APP_NAME, ORG_NAME, SETTINGS_DEFAULTS

logger = logging.getLogger("kbdaccent")


class Subscription:
    """Handle returned by subscribe(); cancel() detaches the listener (idempotent)"""

    def __init__(self, cancel_fn: Optional[Callable[[], None]] = None):
        self._cancel_fn = cancel_fn

    @property
    def active(self) -> bool:
        return self._cancel_fn is not None

    def cancel(self) -> None:
        fn, self._cancel_fn = self._cancel_fn, None
        if fn is not None:
            fn()


class SettingsStore:
    """Interface shared by the real and the null store"""

    def get(self, key: str) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def subscribe(self, key: str, callback: Callable[[Any], None]) -> Subscription:
        raise NotImplementedError


def _coerce(key: str, value: Any) -> Any:
    default = SETTINGS_DEFAULTS.get(key)
    if isinstance(default, bool):
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)
    if isinstance(default, str):
        return "" if value is None else str(value)
    return value


class _Notifier(QObject):
    changed = pyqtSignal(str, object)  # key, new value


class QtSettingsStore(SettingsStore):
    def __init__(self, qsettings: QSettings):
        self._qs = qsettings
        self._notifier = _Notifier()

    @property
    def changed(self):
        return self._notifier.changed

    @property
    def file_name(self) -> str:
        return self._qs.fileName()

    def get(self, key: str) -> Any:
        default = SETTINGS_DEFAULTS.get(key)
        if default is None:
            return self._qs.value(key)
        return _coerce(key, self._qs.value(key, default))

    def set(self, key: str, value: Any) -> None:
        value = _coerce(key, value)
        previous = self.get(key)
        self._qs.setValue(key, value)
        self._qs.sync()
        logger.debug(f"Setting {key} = {value!r}")
        if previous != value:
            self.changed.emit(key, value)

    def subscribe(self, key: str, callback: Callable[[Any], None]) -> Subscription:
        def _slot(changed_key, value):
            if changed_key == key:
                callback(value)

        self.changed.connect(_slot)

        def _disconnect():
            try:
                self.changed.disconnect(_slot)
            except TypeError:
                pass

        return Subscription(_disconnect)


class NullSettingsStore(SettingsStore):
    """Serves defaults, drops writes"""

    def get(self, key: str) -> Any:
        return SETTINGS_DEFAULTS.get(key)

    def set(self, key: str, value: Any) -> None:
        logger.info(f"[Fallback] Setting {key} to {value!r} (not persisted)")

    def subscribe(self, key: str, callback: Callable[[Any], None]) -> Subscription:
        return Subscription()


def open_settings(path: Optional[Union[str, Path]] = None) -> SettingsStore:
    """Pick the store once: QSettings if usable, else the null store"""
    if path is not None:
        qs = QSettings(str(path), QSettings.Format.IniFormat)
    else:
        qs = QSettings(ORG_NAME, APP_NAME)

    if qs.status() != QSettings.Status.NoError:
        logger.warning(f"Settings unavailable ({qs.fileName()}), using defaults")
        return NullSettingsStore()

    logger.info(f"Settings file: {qs.fileName()}")
    return QtSettingsStore(qs)
