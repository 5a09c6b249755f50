"""Control loop: fetch on one timer, render on another, within a daily window."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
import time

from ambibus.config import ScheduleConfig
from ambibus.data.arrivals import ArrivalCache, FetchRecord, project_arrivals
from ambibus.display.encoder import MAX_VALUES, SevenSegmentDisplay

logger = logging.getLogger(__name__)

FetchFn = Callable[[float], FetchRecord]


@dataclass
class ScheduleState:
    """When the last fetch and render happened; zero means never."""

    last_fetch_at: float = 0.0
    last_render_at: float = 0.0


def local_hhmm(now: float) -> int:
    """Local time of day as an HHMM integer, e.g. 7:05pm is 1905."""
    local = time.localtime(now)
    return local.tm_hour * 100 + local.tm_min


def in_active_window(hhmm: int, start: int, end: int) -> bool:
    """Inclusive window check; a start later than the end wraps midnight."""
    if start <= end:
        return start <= hhmm <= end
    return hhmm >= start or hhmm <= end


class DisplayScheduler:
    """Decides each tick whether to fetch, whether to render, and how long to sleep."""

    def __init__(
        self,
        config: ScheduleConfig,
        fetch: FetchFn,
        display: SevenSegmentDisplay,
        cache: ArrivalCache | None = None,
        state: ScheduleState | None = None,
        clock: Callable[[], float] = time.time,
        time_of_day: Callable[[float], int] = local_hhmm,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        self._fetch = fetch
        self._display = display
        self.cache = cache if cache is not None else ArrivalCache()
        self.state = state if state is not None else ScheduleState()
        self._clock = clock
        self._time_of_day = time_of_day
        self._sleep = sleep

    def is_active(self, now: float) -> bool:
        return in_active_window(
            self._time_of_day(now), self._config.active_start, self._config.active_end
        )

    def fetch_window(self) -> int:
        if self.cache.is_empty:
            return self._config.no_info_interval_seconds
        return self._config.fetch_interval_seconds

    def tick(self, now: float | None = None) -> int:
        """Run one iteration of the loop and return the seconds to sleep."""
        if now is None:
            now = self._clock()

        if not self.is_active(now):
            self._display.blank()
            return self._config.inactive_sleep_seconds

        if now - self.state.last_fetch_at >= self.fetch_window():
            self.cache.replace(self._fetch(now))
            self.state.last_fetch_at = now

        if now - self.state.last_render_at >= self._config.render_interval_seconds:
            projected = project_arrivals(self.cache.record, now)
            logger.info("render %s", {"projected": list(projected)})
            self._display.show(projected[:MAX_VALUES])
            self.state.last_render_at = now

        return self._config.active_sleep_seconds

    def start_display(self, brightness: int) -> None:
        """Startup sequence: set brightness, clear, then show a line."""
        self._display.brightness(brightness)
        self._display.blank()
        self._display.line()

    def run(self, brightness: int) -> None:
        """Loop forever; only a fatal frame error or the process dying ends it."""
        self.start_display(brightness)
        logger.info(
            "scheduler_started %s",
            {"active_start": self._config.active_start, "active_end": self._config.active_end},
        )
        while True:
            self._sleep(self.tick())


__all__ = ["DisplayScheduler", "ScheduleState", "in_active_window", "local_hhmm"]
