"""Fixed-time daily scheduler.

This module runs a zero-argument task once a day at a local wall-clock
time. Runs are serial: the next wait starts only after the task returns.
"""

from __future__ import annotations

import threading
from datetime import datetime, time, timedelta
from typing import Callable

from core.errors import DayLedgerScheduleError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def parse_run_time(raw_value: str) -> time:
    """Parse an ``HH:MM`` 24-hour run time.

    Args:
        raw_value: Time text such as ``02:00``.

    Returns:
        Parsed time of day.

    Raises:
        DayLedgerScheduleError: If the value is not a valid ``HH:MM`` time.
    """
    parts = raw_value.strip().split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise DayLedgerScheduleError(
            f"Invalid run time '{raw_value}': expected HH:MM, for example 02:00."
        )
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise DayLedgerScheduleError(
            f"Invalid run time '{raw_value}': hour must be 0-23 and minute 0-59."
        )
    return time(hour=hour, minute=minute)


def seconds_until_next_run(now: datetime, run_time: time) -> float:
    """Compute the delay until the next occurrence of the run time.

    Args:
        now: Current local time.
        run_time: Daily run time.

    Returns:
        Seconds until today's slot, or tomorrow's when today's has passed.
    """
    next_run = now.replace(
        hour=run_time.hour, minute=run_time.minute, second=0, microsecond=0
    )
    if next_run <= now:
        next_run += timedelta(days=1)
    return (next_run - now).total_seconds()


class DailyScheduler:
    """Run a task every day at a fixed local time until stopped."""

    def __init__(
        self,
        task: Callable[[], object],
        run_time: time,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._task = task
        self._run_time = run_time
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        """Return whether the background thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the scheduling loop on a daemon thread.

        Raises:
            DayLedgerScheduleError: If the scheduler was already started.
        """
        if self._thread is not None:
            raise DayLedgerScheduleError("Scheduler already started; create a new instance.")
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run_forever, name="dayledger-scheduler", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the loop to exit after the current wait or task."""
        self._stop_event.set()
        _LOGGER.info("scheduler_stopping")

    def join(self, timeout: float | None = None) -> None:
        """Wait for the background thread to finish."""
        if self._thread is not None:
            self._thread.join(timeout)

    def run_forever(self) -> None:
        """Block and run the task at each daily slot until stopped."""
        while not self._stop_event.is_set():
            delay = seconds_until_next_run(self._clock(), self._run_time)
            _LOGGER.info(
                "scheduler_waiting",
                run_time=self._run_time.strftime("%H:%M"),
                delay_seconds=round(delay),
            )
            if self._stop_event.wait(delay):
                break
            self.run_task()
        _LOGGER.info("scheduler_stopped")

    def run_task(self) -> None:
        """Run the task once, logging any failure instead of raising."""
        try:
            self._task()
        except Exception as error:
            _LOGGER.exception("scheduler_task_failed", error=repr(error))
