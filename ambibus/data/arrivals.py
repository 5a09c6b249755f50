"""Arrival fetching, caching and between-fetch interpolation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging
import math
import time
from typing import Any

from ambibus.data.tfl_client import TflClient, TflClientError

MAX_DISPLAY_MINUTES = 99

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchRecord:
    """Ascending arrival minutes from one fetch and when it happened."""

    arrivals: tuple[int, ...]
    fetched_at: float
    error: str | None = None


EMPTY_RECORD = FetchRecord(arrivals=(), fetched_at=0.0)


class ArrivalCache:
    """Holds the latest fetch; each new record replaces the previous one."""

    def __init__(self) -> None:
        self._record = EMPTY_RECORD

    @property
    def record(self) -> FetchRecord:
        return self._record

    @property
    def is_empty(self) -> bool:
        return not self._record.arrivals

    def replace(self, record: FetchRecord) -> None:
        self._record = record


def arrival_minutes(
    arrivals: Iterable[Any], routes: Iterable[str], walk_minutes: int
) -> tuple[int, ...]:
    """Convert raw TfL arrivals into sorted minutes for the wanted routes.

    Minutes are whole minutes until the bus reaches the stop less the walk
    time. Anything that ends up negative, or too large for two digits, is
    dropped, as are entries without a string line name and a finite time.
    """
    wanted = set(routes)
    minutes: list[int] = []
    for arrival in arrivals:
        if not isinstance(arrival, dict):
            continue
        line_name = arrival.get("lineName")
        seconds = arrival.get("timeToStation")
        if not isinstance(line_name, str) or line_name not in wanted:
            continue
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            continue
        if not math.isfinite(seconds):
            continue
        value = math.floor(seconds / 60) - walk_minutes
        if 0 <= value <= MAX_DISPLAY_MINUTES:
            minutes.append(value)
    return tuple(sorted(minutes))


def fetch_arrivals(
    client: TflClient,
    stop_id: str,
    routes: Iterable[str],
    walk_minutes: int,
    now: float | None = None,
) -> FetchRecord:
    """Fetch arrivals for a stop; a failed request gives an empty record."""
    fetched_at = time.time() if now is None else now
    try:
        raw = client.get_arrivals(stop_id)
    except TflClientError as exc:
        logger.warning("fetch_failed %s", {"stop_id": stop_id, "error": str(exc)})
        return FetchRecord(arrivals=(), fetched_at=fetched_at, error=str(exc))

    arrivals = arrival_minutes(raw, routes, walk_minutes)
    logger.info("fetch_complete %s", {"stop_id": stop_id, "arrivals": list(arrivals)})
    return FetchRecord(arrivals=arrivals, fetched_at=fetched_at)


def project_arrivals(record: FetchRecord, now: float) -> tuple[int, ...]:
    """Age cached arrivals by the whole minutes elapsed since the fetch."""
    delta = max(math.floor((now - record.fetched_at) / 60), 0)
    return tuple(value - delta for value in record.arrivals if value - delta >= 0)


__all__ = [
    "ArrivalCache",
    "EMPTY_RECORD",
    "FetchRecord",
    "MAX_DISPLAY_MINUTES",
    "arrival_minutes",
    "fetch_arrivals",
    "project_arrivals",
]
