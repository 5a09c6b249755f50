"""Byte sinks that receive encoded display commands."""

from __future__ import annotations

from collections.abc import Iterable
import sys
from typing import Protocol, TextIO


class ByteSink(Protocol):
    """Anything that accepts one encoded command at a time."""

    def write(self, data: bytes) -> None: ...


def _printable(data: bytes) -> str:
    return "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in data)


class TraceSink:
    """Human-readable trace of commands for running without hardware."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def write(self, data: bytes) -> None:
        self._stream.write(f"display_send {data.hex(' ')} |{_printable(data)}|\n")
        self._stream.flush()


class FanoutSink:
    """Send each command to every wrapped sink in order."""

    def __init__(self, sinks: Iterable[ByteSink]) -> None:
        self._sinks = list(sinks)

    def write(self, data: bytes) -> None:
        for sink in self._sinks:
            sink.write(data)


__all__ = ["ByteSink", "FanoutSink", "TraceSink"]
