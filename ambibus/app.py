"""Command-line entry point for the bus arrival monitor."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import replace
import logging

from ambibus.config import AppConfig, load_config, parse_routes
from ambibus.data.arrivals import FetchRecord, fetch_arrivals
from ambibus.data.tfl_client import TflClient
from ambibus.display import ByteSink, FanoutSink, SevenSegmentDisplay, TraceSink
from ambibus.display.hardware import SerialSettings, SerialSink
from ambibus.logging_setup import configure_logging
from ambibus.logic.scheduler import DisplayScheduler, FetchFn
from ambibus.rendering import DisplayEmulator

logger = logging.getLogger(__name__)

EMULATOR_PATH = "emulator_output/frame.png"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Show the next bus arrivals on a serial LED display.")
    parser.add_argument("routes", nargs="?", help="Comma separated routes, e.g. 11,411")
    parser.add_argument("stop", nargs="?", help="TfL stop id, e.g. 490007865E")
    parser.add_argument("walk", nargs="?", type=int, help="Walking time to the stop in minutes")
    parser.add_argument("--config", default="config/config.yaml", help="Path to the YAML config")
    parser.add_argument(
        "--output",
        choices=["hardware", "trace", "emulator", "all"],
        default="hardware",
        help="Where display commands go",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Trace display commands to stdout instead of the serial port",
    )
    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Positional routes/stop/walk arguments win over the config file."""
    tfl = config.tfl
    if args.routes is not None:
        tfl = replace(tfl, routes=parse_routes(args.routes))
    if args.stop is not None:
        tfl = replace(tfl, stop_id=args.stop)
    if args.walk is not None:
        if args.walk < 0:
            raise ValueError("walk time must not be negative")
        tfl = replace(tfl, walk_minutes=args.walk)
    return replace(config, tfl=tfl)


def build_sink(config: AppConfig, output: str) -> ByteSink:
    sinks: list[ByteSink] = []
    if output in {"hardware", "all"}:
        sinks.append(
            SerialSink(SerialSettings(port=config.display.serial_port, baud_rate=config.display.baud_rate))
        )
    if output in {"trace", "all"}:
        sinks.append(TraceSink())
    if output in {"emulator", "all"}:
        sinks.append(DisplayEmulator(output_path=EMULATOR_PATH))
    if len(sinks) == 1:
        return sinks[0]
    return FanoutSink(sinks)


def build_fetch(config: AppConfig, client: TflClient) -> FetchFn:
    tfl = config.tfl

    def fetch(now: float) -> FetchRecord:
        return fetch_arrivals(client, tfl.stop_id, tfl.routes, tfl.walk_minutes, now=now)

    return fetch


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = apply_overrides(load_config(args.config), args)
        configure_logging(config.log)
    except (ValueError, OSError) as exc:
        parser.error(str(exc))

    output = "trace" if args.debug else args.output
    display = SevenSegmentDisplay(build_sink(config, output))
    client = TflClient(app_id=config.tfl.app_id, app_key=config.tfl.app_key)
    scheduler = DisplayScheduler(config.schedule, build_fetch(config, client), display)

    logger.info(
        "monitor_ready %s",
        {
            "routes": list(config.tfl.routes),
            "stop_id": config.tfl.stop_id,
            "walk_minutes": config.tfl.walk_minutes,
            "output": output,
        },
    )
    try:
        scheduler.run(config.display.brightness)
    except KeyboardInterrupt:
        logger.info("monitor_stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
