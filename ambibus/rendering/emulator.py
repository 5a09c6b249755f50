"""Software stand-in for the serial display that renders frames to PNG."""

from __future__ import annotations

from dataclasses import replace
import logging
from pathlib import Path

from PIL import Image

from ambibus.display.encoder import (
    CMD_BRIGHTNESS,
    CMD_COLON,
    CMD_FRAME,
    COLON_OFF,
    LED_BASE_ADDRESS,
)
from ambibus.rendering.composer import compose_frame, glyph_segments
from ambibus.rendering.frame_data import DIGIT_COUNT, DisplayState

COMMAND_LENGTHS = {
    CMD_FRAME: 1 + DIGIT_COUNT,
    CMD_COLON: 2,
    CMD_BRIGHTNESS: 2,
}
for _digit in range(1, DIGIT_COUNT + 1):
    COMMAND_LENGTHS[LED_BASE_ADDRESS + _digit] = 2

logger = logging.getLogger(__name__)


def save_frame(image: Image.Image, path: str = "emulator_output/frame.png") -> None:
    """Save a frame to disk as a PNG image."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(output_path, format="PNG")


class DisplayEmulator:
    """Byte sink that decodes display commands into segment state.

    Commands may arrive split across writes; partial commands are held
    until complete. When ``output_path`` is set, every state change is
    rendered and saved.
    """

    def __init__(self, output_path: str | None = None, upside_down: bool = True) -> None:
        self._output_path = output_path
        self._upside_down = upside_down
        self._pending = bytearray()
        self.state = DisplayState()

    def write(self, data: bytes) -> None:
        self._pending.extend(data)
        changed = False
        while self._pending:
            command = self._pending[0]
            length = COMMAND_LENGTHS.get(command)
            if length is None:
                logger.debug("emulator_unknown_command %s", {"byte": hex(command)})
                del self._pending[0]
                continue
            if len(self._pending) < length:
                break
            payload = bytes(self._pending[1:length])
            del self._pending[:length]
            self._apply(command, payload)
            changed = True

        if changed and self._output_path:
            save_frame(self.render(), self._output_path)

    def render(self) -> Image.Image:
        return compose_frame(self.state, upside_down=self._upside_down)

    def _apply(self, command: int, payload: bytes) -> None:
        if command == CMD_FRAME:
            digits = tuple(glyph_segments(chr(b)) for b in payload)
            self.state = replace(self.state, digits=digits)
        elif command == CMD_COLON:
            self.state = replace(self.state, colon=payload[0] != COLON_OFF)
        elif command == CMD_BRIGHTNESS:
            self.state = replace(self.state, brightness=payload[0])
        else:
            digits = list(self.state.digits)
            digits[command - LED_BASE_ADDRESS - 1] = payload[0]
            self.state = replace(self.state, digits=tuple(digits))


__all__ = ["DisplayEmulator", "save_frame"]
