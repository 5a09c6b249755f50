"""Data structures for rendering emulated display frames."""

from __future__ import annotations

from dataclasses import dataclass

DIGIT_COUNT = 4


@dataclass(frozen=True)
class DisplayState:
    """Lit segments per digit, in the display's own left-to-right order.

    Each mask uses bit 0 for segment a through bit 6 for segment g.
    """

    digits: tuple[int, ...] = (0,) * DIGIT_COUNT
    colon: bool = False
    brightness: int | None = None


__all__ = ["DIGIT_COUNT", "DisplayState"]
