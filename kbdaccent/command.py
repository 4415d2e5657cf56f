"""OpenRGB argument construction"""

import shlex
from typing import List, Optional, Sequence

# Modes understood by `openrgb --mode`
MODES = frozenset({
    "static", "breathing", "wave", "rainbow", "gradient", "marquee",
    "cover-marquee", "alternating", "shifting", "reactive", "ripples", "blobs",
})

# Modes that ignore a fixed color
COLORLESS_MODES = frozenset({"rainbow"})


def resolve_mode(effect: Optional[str]) -> str:
    """Map an effect id to an openrgb mode; unknown/empty/'none' -> static"""
    mode = (effect or "").strip().lower()
    return mode if mode in MODES else "static"


def strip_hex(hex_color: str) -> str:
    return hex_color.strip().lstrip("#")


def build(hex_color: str, effect: Optional[str]) -> List[str]:
    mode = resolve_mode(effect)
    args = ["--mode", mode]
    if mode not in COLORLESS_MODES:
        args += ["--color", strip_hex(hex_color)]
    return args


def profile_args(profile: str, hex_color: str, effect: Optional[str]) -> List[str]:
    return ["--profile", profile] + build(hex_color, effect)


def direct_args(device: int, hex_color: str, effect: Optional[str], brightness: int) -> List[str]:
    brightness = max(0, min(100, int(brightness)))
    return ["--device", str(device)] + build(hex_color, effect) + ["--brightness", str(brightness)]


def format_command(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)
