"""Rendering utilities for emulating the 7-segment display."""

from ambibus.rendering.composer import compose_frame
from ambibus.rendering.emulator import DisplayEmulator, save_frame
from ambibus.rendering.frame_data import DisplayState

__all__ = ["DisplayEmulator", "DisplayState", "compose_frame", "save_frame"]
