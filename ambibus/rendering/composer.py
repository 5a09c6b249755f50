"""Frame composer that draws the 7-segment display as a viewer sees it."""

from __future__ import annotations

from PIL import Image, ImageDraw

from ambibus.rendering.frame_data import DIGIT_COUNT, DisplayState

SEGMENTS = "abcdefg"

CELL_WIDTH = 30
CELL_HEIGHT = 48
STROKE = 6
MARGIN_X = 12
MARGIN_Y = 8
DIGIT_GAP = 10
COLON_GAP = 18
COLON_DOT = 4

DISPLAY_WIDTH = 2 * MARGIN_X + DIGIT_COUNT * CELL_WIDTH + 2 * DIGIT_GAP + COLON_GAP
DISPLAY_HEIGHT = 2 * MARGIN_Y + CELL_HEIGHT

COLOR_BACKGROUND = (10, 10, 10)
COLOR_LIT = (255, 40, 20)
COLOR_UNLIT = (40, 12, 8)

# Bit 0 is segment a through bit 6 for segment g.
GLYPH_SEGMENTS = {
    "0": 0x3F,
    "1": 0x06,
    "2": 0x5B,
    "3": 0x4F,
    "4": 0x66,
    "5": 0x6D,
    "6": 0x7D,
    "7": 0x07,
    "8": 0x7F,
    "9": 0x6F,
    "E": 0x79,
    "h": 0x74,
    "L": 0x38,
    "-": 0x40,
    "x": 0x00,
    " ": 0x00,
}


def glyph_segments(char: str) -> int:
    """Segment mask for a character the display can draw; unknown is blank."""
    return GLYPH_SEGMENTS.get(char, 0x00)


def _cell_left(column: int) -> int:
    left = MARGIN_X + column * (CELL_WIDTH + DIGIT_GAP)
    if column >= DIGIT_COUNT // 2:
        left += COLON_GAP - DIGIT_GAP
    return left


def segment_box(column: int, segment: str) -> tuple[int, int, int, int]:
    """Inclusive pixel box for a segment of a 0-based column.

    The layout is symmetric under a half turn, so the same box addresses a
    column and segment in either the device's or the viewer's orientation.
    """
    w, h, t = CELL_WIDTH, CELL_HEIGHT, STROKE
    mid = h // 2
    relative = {
        "a": (t, 0, w - t - 1, t - 1),
        "b": (w - t, t, w - 1, mid - 1),
        "c": (w - t, mid, w - 1, h - t - 1),
        "d": (t, h - t, w - t - 1, h - 1),
        "e": (0, mid, t - 1, h - t - 1),
        "f": (0, t, t - 1, mid - 1),
        "g": (t, mid - t // 2, w - t - 1, mid + t // 2 - 1),
    }[segment]
    left = _cell_left(column)
    return (
        left + relative[0],
        MARGIN_Y + relative[1],
        left + relative[2],
        MARGIN_Y + relative[3],
    )


def segment_center(column: int, segment: str) -> tuple[int, int]:
    x0, y0, x1, y1 = segment_box(column, segment)
    return (x0 + x1) // 2, (y0 + y1) // 2


def _colon_boxes() -> list[tuple[int, int, int, int]]:
    center_x = _cell_left(DIGIT_COUNT // 2) - COLON_GAP // 2
    boxes = []
    for y in (MARGIN_Y + CELL_HEIGHT // 3, MARGIN_Y + CELL_HEIGHT - CELL_HEIGHT // 3):
        boxes.append(
            (
                center_x - COLON_DOT // 2,
                y - COLON_DOT // 2,
                center_x + COLON_DOT // 2 - 1,
                y + COLON_DOT // 2 - 1,
            )
        )
    return boxes


def compose_frame(state: DisplayState, upside_down: bool = True) -> Image.Image:
    """Draw the display state; by default rotated to match the mounting."""
    image = Image.new("RGB", (DISPLAY_WIDTH, DISPLAY_HEIGHT), COLOR_BACKGROUND)
    draw = ImageDraw.Draw(image)

    for column, mask in enumerate(state.digits):
        for bit, segment in enumerate(SEGMENTS):
            color = COLOR_LIT if mask & (1 << bit) else COLOR_UNLIT
            draw.rectangle(segment_box(column, segment), fill=color)

    for box in _colon_boxes():
        draw.rectangle(box, fill=COLOR_LIT if state.colon else COLOR_UNLIT)

    if upside_down:
        image = image.transpose(Image.Transpose.ROTATE_180)
    return image


__all__ = [
    "COLOR_LIT",
    "COLOR_UNLIT",
    "DISPLAY_HEIGHT",
    "DISPLAY_WIDTH",
    "compose_frame",
    "glyph_segments",
    "segment_box",
    "segment_center",
]
