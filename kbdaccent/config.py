"""
Runtime configuration for kbdaccent
Values come from the environment so the tray can be tuned without a prefs UI
"""

import os
from pathlib import Path
from typing import Optional

# --- Identity ---
APP_NAME = "kbdaccent"
ORG_NAME = "kbdaccent"

# --- Paths ---
CONFIG_DIR = Path(os.environ.get("KBDACCENT_CONFIG_DIR", Path.home() / ".config" / "kbdaccent"))
LOG_FILE = CONFIG_DIR / "kbdaccent.log"

# --- OpenRGB ---
DEFAULT_TOOL = "openrgb"
DEFAULT_PROFILE = "kbdaccent"
DEFAULT_DEVICE_INDEX = 0
DEFAULT_BRIGHTNESS = 100


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str) -> Optional[float]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


TOOL = os.environ.get("KBDACCENT_TOOL", DEFAULT_TOOL)
PROFILE = os.environ.get("KBDACCENT_PROFILE", DEFAULT_PROFILE)
DEVICE_INDEX = _env_int("KBDACCENT_DEVICE", DEFAULT_DEVICE_INDEX)
BRIGHTNESS = _env_int("KBDACCENT_BRIGHTNESS", DEFAULT_BRIGHTNESS)
# None means wait for openrgb as long as it takes
PROFILE_TIMEOUT = _env_float("KBDACCENT_PROFILE_TIMEOUT")

# --- Settings keys ---
KEY_SYNC_MODE = "sync-mode"
KEY_CUSTOM_COLOR = "custom-color"
KEY_ANIMATION = "animation"
KEY_ENABLED = "enabled"

SETTINGS_DEFAULTS = {
    KEY_SYNC_MODE: "system",
    KEY_CUSTOM_COLOR: "#3584e4",
    KEY_ANIMATION: "static",
    KEY_ENABLED: True,
}
