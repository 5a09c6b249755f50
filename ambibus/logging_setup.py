"""Logging setup driven by the ``logging`` config section."""

from __future__ import annotations

import logging
from pathlib import Path

from ambibus.config import LoggingConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_FILENAME = "ambibus.log"


def configure_logging(config: LoggingConfig) -> None:
    """Send logs to stderr and to a file under the configured log_dir."""
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {config.level}")

    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_dir / LOG_FILENAME, encoding="utf-8"),
        ],
        force=True,
    )
    logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)


__all__ = ["LOG_FILENAME", "configure_logging"]
