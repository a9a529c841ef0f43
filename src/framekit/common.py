"""framekit.common — shared utilities for scenes and rendering.

Contains: color parsing, ${var} substitution, font loading, and seeded
randomness for scenes that need scatter without breaking determinism.
"""

import re
import zlib
from pathlib import Path

import numpy as np
from PIL import ImageFont

from .errors import ConfigurationError


# ── Font paths ─────────────────────────────────────────────────────
# Inter preferred for clean motion-graphics text, DejaVu Sans as fallback.

FONT_PATHS = [
    Path.home() / ".local/share/fonts/Inter.ttc",
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
]

BOLD_FONT_PATHS = [
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"),
]


# ── Color utilities ────────────────────────────────────────────────

_HEX_RE = re.compile(r"^#?[0-9a-fA-F]{6}$")


def parse_hex_color(hex_str: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' or 'RRGGBB' string to (R, G, B) tuple."""
    if not isinstance(hex_str, str) or not _HEX_RE.match(hex_str):
        raise ConfigurationError(f"Invalid hex color: {hex_str!r}")
    hex_str = hex_str.lstrip("#")
    return (int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16))


def to_rgb(value) -> tuple[int, int, int]:
    """Normalize a color given as '#RRGGBB' or an RGB sequence."""
    if isinstance(value, str):
        return parse_hex_color(value)
    if isinstance(value, (tuple, list)) and len(value) == 3:
        channels = tuple(int(round(c)) for c in value)
        if all(0 <= c <= 255 for c in channels):
            return channels
    raise ConfigurationError(f"Invalid color: {value!r}")


def resolve_color(
    value, palette: dict[str, tuple[int, int, int]],
) -> tuple[int, int, int]:
    """Resolve a color reference — palette key name or inline color.

    Palette keys are tried first, then inline '#RRGGBB' / RGB sequences.
    """
    if isinstance(value, str) and value in palette:
        return palette[value]
    try:
        return to_rgb(value)
    except ConfigurationError:
        raise ConfigurationError(
            f"Unknown color: {value!r}. Not in palette and not a hex value."
        ) from None


# ── Variable substitution ──────────────────────────────────────────


def resolve_vars(text: str, variables: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the variables dict."""
    def _replace(match):
        key = match.group(1)
        if key not in variables:
            raise ConfigurationError(f"Unknown variable: ${{{key}}}")
        return str(variables[key])
    return re.sub(r"\$\{(\w+)\}", _replace, text)


# ── Font loading ───────────────────────────────────────────────────


def load_font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load Inter (or fallback) at the given size.

    Inter.ttc has no separate bold face accessible by index in Pillow, so
    bold tries DejaVu Sans Bold first and otherwise bumps the size.
    """
    size = max(1, int(round(size)))
    candidates = (BOLD_FONT_PATHS + FONT_PATHS) if bold else FONT_PATHS
    for font_path in candidates:
        if font_path.exists():
            try:
                bump = 2 if bold and font_path not in BOLD_FONT_PATHS else 0
                return ImageFont.truetype(str(font_path), size=size + bump, index=0)
            except (OSError, IndexError):
                continue
    # Last resort: Pillow default font (scalable on Pillow >= 10.1).
    try:
        return ImageFont.load_default(size=size)
    except TypeError:
        return ImageFont.load_default()


# ── Seeded randomness ──────────────────────────────────────────────


def random_value(seed: int | str) -> float:
    """Deterministic pseudo-random float in [0, 1) for a given seed.

    Scenes use this instead of unseeded randomness so every frame of a
    scatter effect (particle speeds, sizes) is identical across renders.
    """
    if isinstance(seed, str):
        seed = zlib.crc32(seed.encode("utf-8"))
    if not isinstance(seed, (int, np.integer)) or isinstance(seed, bool):
        raise ConfigurationError(f"random seed must be an int or str, got {seed!r}")
    return float(np.random.default_rng(abs(int(seed))).random())
