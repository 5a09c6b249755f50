"""Configuration loader for the bus arrival monitor."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any

from dotenv import load_dotenv
import yaml


@dataclass(frozen=True)
class TflConfig:
    """TfL API and stop configuration."""

    app_id: str
    app_key: str
    routes: tuple[str, ...]
    stop_id: str
    walk_minutes: int


@dataclass(frozen=True)
class ScheduleConfig:
    """Fetch/render timing and the daily active window."""

    fetch_interval_seconds: int
    no_info_interval_seconds: int
    render_interval_seconds: int
    active_start: int
    active_end: int
    active_sleep_seconds: int = 5
    inactive_sleep_seconds: int = 300


@dataclass(frozen=True)
class DisplayConfig:
    """Serial display configuration."""

    serial_port: str
    baud_rate: int = 9600
    brightness: int = 1


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    log_dir: str


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    tfl: TflConfig
    schedule: ScheduleConfig
    display: DisplayConfig
    log: LoggingConfig


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _require_section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = _require_key(data, key, key)
    if not isinstance(section, dict):
        raise ValueError(f"'{key}' config must be a mapping")
    return section


def parse_routes(value: Any) -> tuple[str, ...]:
    """Accept a list of routes or a comma separated string like "11,411"."""
    if isinstance(value, str):
        routes = [part.strip() for part in value.split(",")]
    elif isinstance(value, (list, tuple)):
        routes = [str(part).strip() for part in value]
    else:
        raise ValueError("'routes' must be a list or a comma separated string")
    routes = [route for route in routes if route]
    if not routes:
        raise ValueError("At least one route is required")
    return tuple(routes)


def validate_hhmm(value: Any, name: str) -> int:
    """Check a 24-hour HHMM time given as an int, e.g. 700 or 2000."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"'{name}' must be an HHMM integer, got {value!r}")
    hours, minutes = divmod(value, 100)
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"'{name}' is not a valid HHMM time: {value}")
    return value


def _positive(value: Any, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ValueError(f"'{name}' must be a positive integer, got {value!r}")
    return value


def _brightness(value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= 255:
        raise ValueError(f"'brightness' must be an integer from 0 to 255, got {value!r}")
    return value


def _serial_port(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"'serial_port' must be a non-empty string, got {value!r}")
    return value


def _walk_minutes(value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"'walk_minutes' must be a non-negative integer, got {value!r}")
    return value


def load_config(path: str = "config/config.yaml") -> AppConfig:
    """Load application configuration from a YAML file."""
    load_dotenv()
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    tfl_section = _require_section(data, "tfl")
    schedule_section = _require_section(data, "schedule")
    display_section = _require_section(data, "display")
    logging_section = _require_section(data, "logging")

    tfl = TflConfig(
        app_id=os.environ.get("TFL_APP_ID", ""),
        app_key=os.environ.get("TFL_APP_KEY", ""),
        routes=parse_routes(_require_key(tfl_section, "routes", "tfl")),
        stop_id=str(_require_key(tfl_section, "stop_id", "tfl")),
        walk_minutes=_walk_minutes(_require_key(tfl_section, "walk_minutes", "tfl")),
    )

    schedule = ScheduleConfig(
        fetch_interval_seconds=_positive(
            _require_key(schedule_section, "fetch_interval_seconds", "schedule"),
            "fetch_interval_seconds",
        ),
        no_info_interval_seconds=_positive(
            _require_key(schedule_section, "no_info_interval_seconds", "schedule"),
            "no_info_interval_seconds",
        ),
        render_interval_seconds=_positive(
            _require_key(schedule_section, "render_interval_seconds", "schedule"),
            "render_interval_seconds",
        ),
        active_start=validate_hhmm(
            _require_key(schedule_section, "active_start", "schedule"), "active_start"
        ),
        active_end=validate_hhmm(
            _require_key(schedule_section, "active_end", "schedule"), "active_end"
        ),
        active_sleep_seconds=_positive(
            schedule_section.get("active_sleep_seconds", 5), "active_sleep_seconds"
        ),
        inactive_sleep_seconds=_positive(
            schedule_section.get("inactive_sleep_seconds", 300), "inactive_sleep_seconds"
        ),
    )

    display = DisplayConfig(
        serial_port=_serial_port(_require_key(display_section, "serial_port", "display")),
        baud_rate=_positive(display_section.get("baud_rate", 9600), "baud_rate"),
        brightness=_brightness(display_section.get("brightness", 1)),
    )

    logging = LoggingConfig(
        level=_require_key(logging_section, "level", "logging"),
        log_dir=_require_key(logging_section, "log_dir", "logging"),
    )

    return AppConfig(tfl=tfl, schedule=schedule, display=display, log=logging)


__all__ = [
    "AppConfig",
    "DisplayConfig",
    "LoggingConfig",
    "ScheduleConfig",
    "TflConfig",
    "load_config",
    "parse_routes",
    "validate_hhmm",
]
