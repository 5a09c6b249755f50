"""Frame encoder for the SparkFun serial 7-segment display."""

from __future__ import annotations

from collections.abc import Sequence
import logging

from ambibus.display.glyphs import BLANK_GLYPH, DASH_GLYPH, UNDRAWABLE_DIGIT, glyph_for
from ambibus.display.sinks import ByteSink

CMD_FRAME = 0x76
CMD_COLON = 0x77
CMD_BRIGHTNESS = 0x7A
LED_BASE_ADDRESS = 0x7A
LED_ONE_SEGMENTS = 0x30
COLON_ON = 0x10
COLON_OFF = 0x00

FRAME_WIDTH = 4
MAX_VALUES = 2
EMPTY_FIELD = "  "

BLANK_COMMAND = bytes([CMD_FRAME]) + (BLANK_GLYPH * FRAME_WIDTH).encode("ascii")

logger = logging.getLogger(__name__)


class FrameError(RuntimeError):
    """Raised when an internally built frame is not exactly four characters."""


def brightness_command(level: int) -> bytes:
    if not 0 <= level <= 0xFF:
        raise ValueError(f"Brightness must be between 0 and 255, got {level}")
    return bytes([CMD_BRIGHTNESS, level])


def colon_command(on: bool) -> bytes:
    return bytes([CMD_COLON, COLON_ON if on else COLON_OFF])


def led_command(position: int) -> bytes:
    """Light the segments standing in for a 1 at a 1-based logical column."""
    if not 1 <= position <= FRAME_WIDTH:
        raise FrameError(f"LED position out of range: {position}")
    return bytes([LED_BASE_ADDRESS + (FRAME_WIDTH + 1 - position), LED_ONE_SEGMENTS])


def format_quad(values: Sequence[int]) -> str:
    """Lay out one or two values as two right-justified 2-character fields."""
    if not 1 <= len(values) <= MAX_VALUES:
        raise ValueError(f"Expected 1 or 2 values, got {len(values)}")
    if len(values) == 1:
        return EMPTY_FIELD + f"{values[0]:2d}"
    return f"{values[0]:2d}{values[1]:2d}"


def apply_spacing(quad: str) -> str:
    """Turn " X YZ" style frames into "X YZ" so the two numbers stay apart."""
    if quad[2] != " " and quad[0] == " ":
        return quad[1] + " " + quad[2:4]
    return quad


def translate_quad(quad: str) -> tuple[str, list[int]]:
    """Substitute glyphs and reverse for the upside-down mounting.

    Returns the characters in send order and the 1-based logical positions
    (left to right, before reversal) that held an undrawable 1.
    """
    if len(quad) != FRAME_WIDTH:
        raise FrameError(f"Frame must be {FRAME_WIDTH} characters, got {quad!r}")

    ones: list[int] = []
    glyphs = ""
    for position, char in enumerate(quad, start=1):
        glyphs = glyph_for(char) + glyphs
        if char == UNDRAWABLE_DIGIT:
            ones.append(position)
    return glyphs, ones


def encode_quad(quad: str) -> list[bytes]:
    """Build the frame command and LED follow-ups for a 4-character frame."""
    if len(quad) != FRAME_WIDTH:
        raise FrameError(f"Frame must be {FRAME_WIDTH} characters, got {quad!r}")

    glyphs, ones = translate_quad(apply_spacing(quad))
    commands = [bytes([CMD_FRAME]) + glyphs.encode("ascii")]
    commands.extend(led_command(position) for position in ones)
    return commands


def encode_values(values: Sequence[int]) -> list[bytes]:
    """Encode up to two arrival values; no values gives the blank frame."""
    if not values:
        return [BLANK_COMMAND]
    return encode_quad(format_quad(values))


class SevenSegmentDisplay:
    """Writes encoded commands for the 4-digit display to a byte sink."""

    def __init__(self, sink: ByteSink) -> None:
        self._sink = sink

    def show(self, values: Sequence[int]) -> None:
        """Show up to the first two values, or blank when there are none."""
        shown = list(values[:MAX_VALUES])
        logger.debug("display_show %s", {"values": shown})
        self._send(encode_values(shown))

    def quad(self, text: str) -> None:
        self._send(encode_quad(text))

    def line(self) -> None:
        self.quad(DASH_GLYPH * FRAME_WIDTH)

    def blank(self) -> None:
        self._send([BLANK_COMMAND])

    def brightness(self, level: int) -> None:
        self._send([brightness_command(level)])

    def colon(self, on: bool) -> None:
        self._send([colon_command(on)])

    def _send(self, commands: list[bytes]) -> None:
        for command in commands:
            self._sink.write(command)


__all__ = [
    "BLANK_COMMAND",
    "FrameError",
    "SevenSegmentDisplay",
    "apply_spacing",
    "brightness_command",
    "colon_command",
    "encode_quad",
    "encode_values",
    "format_quad",
    "led_command",
    "translate_quad",
]
