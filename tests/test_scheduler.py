from __future__ import annotations

import time
from unittest.mock import MagicMock, call

import pytest

from ambibus.config import ScheduleConfig
from ambibus.data.arrivals import FetchRecord, fetch_arrivals
from ambibus.logic.scheduler import DisplayScheduler, in_active_window, local_hhmm

T0 = 1_700_000_000.0


class _StopLoop(Exception):
    pass


def _config(**overrides) -> ScheduleConfig:
    values = {
        "fetch_interval_seconds": 30,
        "no_info_interval_seconds": 10,
        "render_interval_seconds": 30,
        "active_start": 700,
        "active_end": 2000,
        "active_sleep_seconds": 5,
        "inactive_sleep_seconds": 300,
    }
    values.update(overrides)
    return ScheduleConfig(**values)


def _fetch_returning(*arrivals: int) -> MagicMock:
    fetch = MagicMock()
    fetch.side_effect = lambda now: FetchRecord(arrivals=tuple(arrivals), fetched_at=now)
    return fetch


def _scheduler(fetch, display, hhmm: int = 1200, **overrides) -> DisplayScheduler:
    return DisplayScheduler(
        _config(**overrides),
        fetch,
        display,
        clock=lambda: T0,
        time_of_day=lambda now: hhmm,
        sleep=MagicMock(),
    )


def test_first_tick_fetches_and_renders() -> None:
    fetch = _fetch_returning(3, 8, 14)
    display = MagicMock()
    scheduler = _scheduler(fetch, display)

    sleep_for = scheduler.tick(T0)

    fetch.assert_called_once_with(T0)
    display.show.assert_called_once_with((3, 8))
    assert scheduler.state.last_fetch_at == T0
    assert scheduler.state.last_render_at == T0
    assert sleep_for == 5


def test_tick_uses_clock_when_no_time_given() -> None:
    fetch = _fetch_returning(4)
    display = MagicMock()
    scheduler = _scheduler(fetch, display)

    scheduler.tick()

    fetch.assert_called_once_with(T0)


def test_render_waits_for_render_interval() -> None:
    fetch = _fetch_returning(3)
    display = MagicMock()
    scheduler = _scheduler(fetch, display)

    scheduler.tick(T0)
    scheduler.tick(T0 + 5)
    scheduler.tick(T0 + 29)
    assert display.show.call_count == 1

    scheduler.tick(T0 + 30)
    assert display.show.call_count == 2


def test_render_interpolates_between_fetches() -> None:
    fetch = _fetch_returning(2, 9)
    display = MagicMock()
    scheduler = _scheduler(fetch, display, fetch_interval_seconds=600)

    scheduler.tick(T0)
    scheduler.tick(T0 + 185)

    fetch.assert_called_once()
    assert display.show.call_args_list == [call((2, 9)), call((6,))]


def test_normal_fetch_interval_when_arrivals_cached() -> None:
    fetch = _fetch_returning(5)
    display = MagicMock()
    scheduler = _scheduler(fetch, display)

    scheduler.tick(T0)
    scheduler.tick(T0 + 10)
    scheduler.tick(T0 + 25)
    assert fetch.call_count == 1

    scheduler.tick(T0 + 30)
    assert fetch.call_count == 2


def test_empty_cache_refetches_after_no_info_interval() -> None:
    fetch = _fetch_returning()
    display = MagicMock()
    scheduler = _scheduler(fetch, display)

    scheduler.tick(T0)
    scheduler.tick(T0 + 5)
    assert fetch.call_count == 1

    scheduler.tick(T0 + 10)
    assert fetch.call_count == 2
    assert scheduler.state.last_fetch_at == T0 + 10


def test_failed_fetch_still_throttles() -> None:
    fetch = MagicMock(return_value=FetchRecord(arrivals=(), fetched_at=T0, error="timeout"))
    display = MagicMock()
    scheduler = _scheduler(fetch, display)

    scheduler.tick(T0)
    scheduler.tick(T0 + 9)

    assert fetch.call_count == 1
    assert scheduler.state.last_fetch_at == T0
    display.show.assert_called_once_with(())


def test_inactive_blanks_every_tick_and_never_fetches() -> None:
    fetch = _fetch_returning(5)
    display = MagicMock()
    scheduler = _scheduler(fetch, display, hhmm=2130)

    sleeps = [scheduler.tick(T0 + offset) for offset in (0, 300, 3600)]

    fetch.assert_not_called()
    display.show.assert_not_called()
    assert display.blank.call_count == 3
    assert sleeps == [300, 300, 300]
    assert scheduler.state.last_fetch_at == 0.0


def test_window_reentry_fetches_immediately() -> None:
    fetch = _fetch_returning(5)
    display = MagicMock()
    hhmm = {"value": 1200}
    scheduler = DisplayScheduler(
        _config(),
        fetch,
        display,
        time_of_day=lambda now: hhmm["value"],
    )

    scheduler.tick(T0)
    hhmm["value"] = 2100
    scheduler.tick(T0 + 60)
    hhmm["value"] = 1200
    scheduler.tick(T0 + 120)

    assert fetch.call_count == 2
    assert display.blank.call_count == 1


def test_run_sends_startup_sequence_then_loops() -> None:
    fetch = _fetch_returning(7)
    display = MagicMock()
    sleep = MagicMock(side_effect=[None, _StopLoop()])
    scheduler = DisplayScheduler(
        _config(),
        fetch,
        display,
        clock=lambda: T0,
        time_of_day=lambda now: 1200,
        sleep=sleep,
    )

    with pytest.raises(_StopLoop):
        scheduler.run(brightness=1)

    assert display.mock_calls[:4] == [
        call.brightness(1),
        call.blank(),
        call.line(),
        call.show((7,)),
    ]
    assert sleep.call_args_list == [call(5), call(5)]


@pytest.mark.parametrize(
    ("hhmm", "expected"),
    [(659, False), (700, True), (1230, True), (2000, True), (2001, False), (0, False)],
)
def test_in_active_window_inclusive(hhmm: int, expected: bool) -> None:
    assert in_active_window(hhmm, 700, 2000) is expected


@pytest.mark.parametrize(
    ("hhmm", "expected"),
    [(2200, True), (2359, True), (0, True), (300, True), (301, False), (1200, False)],
)
def test_in_active_window_wraps_midnight(hhmm: int, expected: bool) -> None:
    assert in_active_window(hhmm, 2200, 300) is expected


def test_local_hhmm() -> None:
    now = time.mktime((2024, 1, 15, 19, 5, 30, 0, 0, -1))

    assert local_hhmm(now) == 1905


def test_tick_survives_malformed_arrivals() -> None:
    client = MagicMock()
    client.get_arrivals.return_value = [
        {"lineName": {"x": 1}, "timeToStation": 60},
        {"lineName": "11", "timeToStation": 300},
    ]
    display = MagicMock()
    scheduler = _scheduler(
        lambda now: fetch_arrivals(client, "stop", ["11"], 0, now=now), display
    )

    assert scheduler.tick(T0) == 5
    display.show.assert_called_once_with((5,))
