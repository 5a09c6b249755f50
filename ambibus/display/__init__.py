"""Display encoding and output adapters."""

from ambibus.display.encoder import FrameError, SevenSegmentDisplay, encode_values
from ambibus.display.hardware import SerialSettings, SerialSink
from ambibus.display.sinks import ByteSink, FanoutSink, TraceSink

__all__ = [
    "ByteSink",
    "FanoutSink",
    "FrameError",
    "SerialSettings",
    "SerialSink",
    "SevenSegmentDisplay",
    "TraceSink",
    "encode_values",
]
