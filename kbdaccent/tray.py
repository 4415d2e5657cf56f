"""System tray menu: colors, effects, custom hex prompt, enable toggle"""

import logging

from PyQt6.QtCore import QObject
from PyQt6.QtGui import QAction, QActionGroup, QColor, QIcon, QPixmap
from PyQt6.QtWidgets import QApplication, QInputDialog, QLineEdit, QMenu, QSystemTrayIcon

from . import colors
from .config import KEY_CUSTOM_COLOR
from .controller import SyncController, SyncMode, SyncState
from .errors import InvalidInput

logger = logging.getLogger("kbdaccent")

TRAY_ICON_NAME = "keyboard-brightness-symbolic"


def swatch(hex_color: str, size: int = 16) -> QIcon:
    pix = QPixmap(size, size)
    pix.fill(QColor(hex_color))
    return QIcon(pix)


class TrayMenu(QObject):
    def __init__(self, controller: SyncController, parent=None):
        super().__init__(parent)
        self.controller = controller

        self.tray = QSystemTrayIcon(self)
        self.tray.setIcon(QIcon.fromTheme(TRAY_ICON_NAME, swatch(controller.current_hex())))
        self.menu = QMenu()
        self._color_actions = {}
        self._effect_actions = {}
        self._build_menu()
        self.tray.setContextMenu(self.menu)

        controller.state_changed.connect(self.on_state_changed)
        self.on_state_changed(controller.snapshot())

    def _build_menu(self):
        color_group = QActionGroup(self)
        color_group.setExclusive(True)

        self.system_action = QAction(QIcon.fromTheme("preferences-system-symbolic"), "System Accent", self)
        self.system_action.setCheckable(True)
        self.system_action.triggered.connect(lambda _checked=False: self.controller.resync())
        color_group.addAction(self.system_action)
        self.menu.addAction(self.system_action)
        self.menu.addSeparator()

        for entry in colors.COLORS:
            act = QAction(swatch(entry.hex), entry.label, self)
            act.setCheckable(True)
            act.triggered.connect(lambda _checked=False, key=entry.key: self.controller.select_color(key))
            color_group.addAction(act)
            self.menu.addAction(act)
            self._color_actions[entry.key] = act

        self.custom_action = QAction(QIcon.fromTheme("document-edit-symbolic"), "Custom…", self)
        self.custom_action.setCheckable(True)
        self.custom_action.triggered.connect(lambda _checked=False: self.prompt_custom_color())
        color_group.addAction(self.custom_action)
        self.menu.addAction(self.custom_action)

        effects_menu = self.menu.addMenu("Effects")
        effect_group = QActionGroup(self)
        effect_group.setExclusive(True)
        for effect in colors.EFFECTS:
            act = QAction(effect.label, self)
            act.setToolTip(effect.description)
            act.setCheckable(True)
            act.triggered.connect(lambda _checked=False, eid=effect.id: self.controller.select_effect(eid))
            effect_group.addAction(act)
            effects_menu.addAction(act)
            self._effect_actions[effect.id] = act

        self.menu.addSeparator()
        self.enabled_action = QAction("Enabled", self)
        self.enabled_action.setCheckable(True)
        self.enabled_action.toggled.connect(self.controller.set_enabled)
        self.menu.addAction(self.enabled_action)

        quit_action = QAction("Quit", self)
        quit_action.triggered.connect(lambda _checked=False: QApplication.quit())
        self.menu.addAction(quit_action)

    def show(self):
        self.tray.show()

    def notify(self, title: str, message: str):
        self.tray.showMessage(title, message, QSystemTrayIcon.MessageIcon.Warning)

    def prompt_custom_color(self):
        text = self.controller.settings.get(KEY_CUSTOM_COLOR) or colors.default_color().hex
        label = "Enter a hex color (#RRGGBB or #RGB):"
        while True:
            text, ok = QInputDialog.getText(None, "Enter Custom Color", label, QLineEdit.EchoMode.Normal, text)
            if not ok:
                # Restore check marks on cancel
                self.on_state_changed(self.controller.snapshot())
                return
            try:
                self.controller.select_custom_color(text)
                return
            except InvalidInput as e:
                logger.info(f"Rejected custom color: {e}")
                label = f"'{text}' is not a hex color. Use #RRGGBB or #RGB:"

    def on_state_changed(self, state: SyncState):
        if state.mode is SyncMode.SYSTEM:
            self.system_action.setChecked(True)
            subtitle = "System Accent"
        elif state.last_color_key in self._color_actions:
            self._color_actions[state.last_color_key].setChecked(True)
            subtitle = colors.lookup(state.last_color_key).label
        else:
            self.custom_action.setChecked(True)
            subtitle = state.hex

        act = self._effect_actions.get(state.last_effect)
        if act is not None:
            act.setChecked(True)

        self.enabled_action.blockSignals(True)
        self.enabled_action.setChecked(self.controller.enabled)
        self.enabled_action.blockSignals(False)

        self.tray.setToolTip(f"Keyboard color: {subtitle} ({state.last_effect})")
