"""
Sync controller
Owns SyncState and decides when the keyboard color is re-applied:
- SYSTEM: follow the host accent color
- MANUAL: user-pinned color/effect, host accent changes ignored until resync()
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from . import colors
from .accent import AccentSource
from .config import KEY_ANIMATION, KEY_CUSTOM_COLOR, KEY_ENABLED, KEY_SYNC_MODE
from .errors import InvalidInput
from .runner import ApplyResult, ProcessRunner
from .settings import SettingsStore, Subscription

logger = logging.getLogger("kbdaccent")


class SyncMode(Enum):
    SYSTEM = "system"
    MANUAL = "custom"  # value stored under sync-mode


@dataclass
class SyncState:
    mode: SyncMode = SyncMode.SYSTEM
    last_color_key: str = colors.DEFAULT_COLOR_KEY
    last_effect: str = colors.DEFAULT_EFFECT
    previous_accent: Optional[str] = None
    custom_hex: Optional[str] = None  # set only when last_color_key == "custom"

    @property
    def hex(self) -> str:
        if self.last_color_key == colors.CUSTOM_COLOR_KEY and self.custom_hex:
            return self.custom_hex
        entry = colors.lookup(self.last_color_key) or colors.default_color()
        return entry.hex


class SyncController(QObject):
    state_changed = pyqtSignal(object)  # SyncState snapshot

    def __init__(self, settings: SettingsStore, accent_source: AccentSource, runner: ProcessRunner):
        super().__init__()
        self.settings = settings
        self.accent_source = accent_source
        self.runner = runner
        self.state = SyncState()
        self.enabled = bool(settings.get(KEY_ENABLED))
        self.last_result: Optional[ApplyResult] = None
        self._subscriptions: List[Subscription] = []
        self._alive = False

    # --- Lifecycle ---
    @classmethod
    def create(cls, settings: SettingsStore, accent_source: AccentSource,
               runner: ProcessRunner) -> "SyncController":
        ctl = cls(settings, accent_source, runner)
        ctl._alive = True
        ctl._subscriptions.append(accent_source.subscribe(ctl.on_host_accent_changed))
        ctl._subscriptions.append(settings.subscribe(KEY_ENABLED, ctl._on_enabled_setting))
        ctl.restore()
        return ctl

    def teardown(self) -> None:
        self._alive = False
        while self._subscriptions:
            self._subscriptions.pop().cancel()
        logger.info("Controller torn down")

    def restore(self) -> None:
        """Rebuild state from the stored preferences and the current host accent"""
        effect = self._effect_or_default(self.settings.get(KEY_ANIMATION))
        self.state.last_effect = effect
        if self.settings.get(KEY_SYNC_MODE) == SyncMode.MANUAL.value:
            stored = self.settings.get(KEY_CUSTOM_COLOR)
            try:
                hex_color = colors.normalize_hex(stored)
            except InvalidInput:
                logger.warning(f"Stored custom color {stored!r} is invalid, following system accent")
                self.resync()
                return
            logger.info(f"Restoring manual color {hex_color} ({effect})")
            self._pin(hex_color)
            self._apply()
            self._emit()
        else:
            self.resync()

    # --- User actions ---
    def select_color(self, key: str) -> None:
        entry = colors.lookup(key)
        if entry is None:
            entry = colors.resolve_accent(key)
        logger.info(f"Selected color: {entry.key} ({entry.label}), Hex: {entry.hex}")
        self.state.mode = SyncMode.MANUAL
        self.state.last_color_key = entry.key
        self.state.custom_hex = None
        self._persist_manual(entry.hex)
        self._apply()
        self._emit()

    def select_custom_color(self, text: str) -> str:
        """Pin a typed hex color; raises InvalidInput so the prompt can stay open"""
        hex_color = colors.normalize_hex(text)
        logger.info(f"Custom color set to: {hex_color}")
        self._pin(hex_color)
        self._persist_manual(hex_color)
        self._apply()
        self._emit()
        return hex_color

    def select_effect(self, effect: str) -> None:
        effect_id = self._effect_or_default(effect)
        logger.info(f"Selected animation: {effect_id}")
        self.state.last_effect = effect_id
        self.settings.set(KEY_ANIMATION, effect_id)
        self._apply()
        self._emit()

    def resync(self) -> None:
        accent = self.accent_source.read()
        entry = colors.resolve_accent(accent)
        logger.info(f"Following system accent: {accent or '<unset>'} -> {entry.key} {entry.hex}")
        self.state.mode = SyncMode.SYSTEM
        self.state.previous_accent = accent
        self.state.last_color_key = entry.key
        self.state.custom_hex = None
        self.settings.set(KEY_SYNC_MODE, SyncMode.SYSTEM.value)
        self._apply()
        self._emit()

    def set_enabled(self, flag: bool) -> None:
        self._set_enabled(bool(flag))
        self.settings.set(KEY_ENABLED, bool(flag))

    # --- Host notifications ---
    def on_host_accent_changed(self) -> None:
        if not self._alive or self.state.mode is SyncMode.MANUAL:
            return
        accent = self.accent_source.read()
        if accent == self.state.previous_accent:
            logger.debug(f"Accent unchanged ({accent}), ignoring notification")
            return
        self.state.previous_accent = accent
        entry = colors.resolve_accent(accent)
        logger.info(f"System accent color changed to {accent or '<unset>'}, updating keyboard")
        self.state.last_color_key = entry.key
        self._apply()
        self._emit()

    def _on_enabled_setting(self, value) -> None:
        if self._alive:
            self._set_enabled(bool(value))

    # --- Internals ---
    def current_hex(self) -> str:
        return self.state.hex

    def snapshot(self) -> SyncState:
        return replace(self.state)

    def _set_enabled(self, flag: bool) -> None:
        if flag == self.enabled:
            return
        self.enabled = flag
        logger.info(f"Keyboard sync {'enabled' if flag else 'disabled'}")
        if flag:
            self._apply()
        self._emit()

    def _pin(self, hex_color: str) -> None:
        self.state.mode = SyncMode.MANUAL
        match = colors.find_by_hex(hex_color)
        if match is not None:
            self.state.last_color_key = match.key
            self.state.custom_hex = None
        else:
            self.state.last_color_key = colors.CUSTOM_COLOR_KEY
            self.state.custom_hex = hex_color

    def _persist_manual(self, hex_color: str) -> None:
        self.settings.set(KEY_SYNC_MODE, SyncMode.MANUAL.value)
        self.settings.set(KEY_CUSTOM_COLOR, hex_color)

    def _apply(self) -> Optional[ApplyResult]:
        if not self.enabled:
            logger.info("OpenRGB update skipped - sync disabled")
            return None
        hex_color = self.state.hex
        logger.debug(f"Applying {hex_color} ({self.state.last_effect}), mode={self.state.mode.value}")
        self.last_result = self.runner.apply(hex_color, self.state.last_effect)
        return self.last_result

    def _emit(self) -> None:
        self.state_changed.emit(self.snapshot())

    @staticmethod
    def _effect_or_default(effect) -> str:
        mode = colors.effect_by_id(effect)
        return mode.id if mode is not None else colors.DEFAULT_EFFECT
