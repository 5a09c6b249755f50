"""Glyph alphabet for the upside-down SparkFun serial 7-segment display."""

from __future__ import annotations

BLANK_GLYPH = "x"
DASH_GLYPH = "-"

# Each digit maps to the character that looks like it once the display is
# rotated 180 degrees. There is no such character for 1.
DIGIT_GLYPHS = {
    "0": "0",
    "1": BLANK_GLYPH,
    "2": "2",
    "3": "E",
    "4": "h",
    "5": "5",
    "6": "9",
    "7": "L",
    "8": "8",
    "9": "6",
}

UNDRAWABLE_DIGIT = "1"


def glyph_for(char: str) -> str:
    """Return the device glyph for a frame character; non-digits pass through."""
    return DIGIT_GLYPHS.get(char, char)


__all__ = ["BLANK_GLYPH", "DASH_GLYPH", "DIGIT_GLYPHS", "UNDRAWABLE_DIGIT", "glyph_for"]
