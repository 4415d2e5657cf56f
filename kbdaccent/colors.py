"""
Palette and effect definitions
- COLORS: accent names (as reported by gsettings) -> hex
- EFFECTS: OpenRGB modes offered in the menu
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .errors import InvalidInput, UnmappedColor

logger = logging.getLogger("kbdaccent")


@dataclass(frozen=True)
class ColorEntry:
    key: str
    label: str
    hex: str


@dataclass(frozen=True)
class EffectMode:
    id: str
    label: str
    description: str


# --- Palette ---
COLORS: Tuple[ColorEntry, ...] = (
    ColorEntry("blue", "Blue", "#3584e4"),
    ColorEntry("teal", "Teal", "#2ec27e"),
    ColorEntry("green", "Green", "#26a269"),
    ColorEntry("yellow", "Yellow", "#e5a50a"),
    ColorEntry("orange", "Orange", "#e67e22"),
    ColorEntry("red", "Red", "#c01c28"),
    ColorEntry("purple", "Purple", "#a51d8a"),
    ColorEntry("pink", "Pink", "#e23689"),
    ColorEntry("brown", "Brown", "#986a44"),
    ColorEntry("slate", "Slate", "#5f6e7d"),
    # Extended palettes (Ubuntu/Plasma style accents)
    ColorEntry("maia", "Maia", "#5885a2"),
    ColorEntry("asphalt", "Asphalt", "#232629"),
    ColorEntry("graphite", "Graphite", "#777777"),
    ColorEntry("silver", "Silver", "#c0c0c0"),
    ColorEntry("plum", "Plum", "#7c154d"),
    ColorEntry("berry", "Berry", "#722258"),
    ColorEntry("ocean", "Ocean", "#006e96"),
    ColorEntry("sand", "Sand", "#dac5a3"),
    ColorEntry("sage", "Sage", "#718862"),
)

DEFAULT_COLOR_KEY = "blue"
CUSTOM_COLOR_KEY = "custom"

_BY_KEY: Dict[str, ColorEntry] = {c.key: c for c in COLORS}
_ALIASES = {"default": DEFAULT_COLOR_KEY}

# --- Effects ---
EFFECTS: Tuple[EffectMode, ...] = (
    EffectMode("static", "Static", "Solid color"),
    EffectMode("breathing", "Breathing", "Color fades in and out"),
    EffectMode("wave", "Wave", "Color sweeps across the keys"),
    EffectMode("rainbow", "Rainbow", "Cycles through all hues, ignores the color"),
    EffectMode("gradient", "Gradient", "Gradient built from the color"),
    EffectMode("marquee", "Marquee", "Running light"),
    EffectMode("cover-marquee", "Cover Marquee", "Running light filling the board"),
    EffectMode("alternating", "Alternating", "Alternating key groups"),
    EffectMode("shifting", "Shifting", "Color shifts over time"),
    EffectMode("reactive", "Reactive", "Keys light up when pressed"),
    EffectMode("ripples", "Ripples", "Ripples spread from pressed keys"),
    EffectMode("blobs", "Blobs", "Drifting color blobs"),
)

DEFAULT_EFFECT = "static"

_EFFECTS_BY_ID: Dict[str, EffectMode] = {e.id: e for e in EFFECTS}

HEX_PATTERN = re.compile(r"^#?([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$")


def _clean_name(name) -> str:
    if name is None:
        return ""
    # gsettings prints strings quoted: 'teal'
    return str(name).strip().strip("'\"").strip().lower()


def lookup(name) -> Optional[ColorEntry]:
    """Palette entry for a color name, None if unknown"""
    key = _clean_name(name)
    key = _ALIASES.get(key, key)
    return _BY_KEY.get(key)


def default_color() -> ColorEntry:
    return _BY_KEY[DEFAULT_COLOR_KEY]


def resolve_accent(name) -> ColorEntry:
    """
    Palette entry for a host accent name
    Unknown or empty names fall back to blue (never raises)
    """
    entry = lookup(name)
    if entry is None:
        logger.warning(f"{UnmappedColor(_clean_name(name) or '<empty>')}, using {DEFAULT_COLOR_KEY}")
        return default_color()
    return entry


def find_by_hex(hex_color: str) -> Optional[ColorEntry]:
    """Palette entry whose hex equals hex_color (case-insensitive)"""
    target = "#" + hex_color.strip().lstrip("#").lower()
    for entry in COLORS:
        if entry.hex == target:
            return entry
    return None


def normalize_hex(text: str) -> str:
    """
    Validate a user-typed hex color and return it as #RRGGBB
    '#RGB' / 'RGB' are expanded by doubling each nibble.
    Raises InvalidInput for anything else.
    """
    value = (text or "").strip()
    if not HEX_PATTERN.match(value):
        raise InvalidInput(text)
    digits = value.lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return "#" + digits


def effect_by_id(effect_id) -> Optional[EffectMode]:
    if not effect_id:
        return None
    return _EFFECTS_BY_ID.get(str(effect_id).strip().lower())
