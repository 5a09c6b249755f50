"""Serial output driver for the SparkFun 7-segment display."""

from __future__ import annotations

from dataclasses import dataclass
import logging

import serial

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SerialSettings:
    """Serial line settings; the display expects 9600 8N1."""

    port: str = "/dev/ttyS1"
    baud_rate: int = 9600
    write_timeout: float = 1.0


class SerialSink:
    """Fire-and-forget writer for the display's serial port.

    The port is opened on first use. A failed open or write is logged and
    dropped, and the port is reopened on the next write.
    """

    def __init__(self, settings: SerialSettings) -> None:
        self._settings = settings
        self._port: serial.Serial | None = None

    def write(self, data: bytes) -> None:
        try:
            port = self._open()
            port.write(data)
            port.flush()
        except (serial.SerialException, OSError) as exc:
            logger.debug("serial_write_failed %s", {"port": self._settings.port, "error": str(exc)})
            self.close()

    def close(self) -> None:
        if self._port is None:
            return
        try:
            self._port.close()
        except (serial.SerialException, OSError):
            pass
        self._port = None

    def _open(self) -> serial.Serial:
        if self._port is None:
            self._port = serial.Serial(
                port=self._settings.port,
                baudrate=self._settings.baud_rate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                xonxoff=False,
                rtscts=False,
                dsrdtr=False,
                write_timeout=self._settings.write_timeout,
            )
        return self._port


__all__ = ["SerialSettings", "SerialSink"]
