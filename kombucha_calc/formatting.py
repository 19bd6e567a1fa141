"""Human-readable text for the projected finish, elapsed time and progress."""

import math
from datetime import datetime


def _weekday_index(moment):
    # Sunday = 0 ... Saturday = 6
    return moment.isoweekday() % 7


def days_until(finish_instant: datetime, now: datetime) -> int:
    """Whole calendar days between the start of today and the finish day."""
    return (finish_instant.date() - now.date()).days


def format_projection(finish_instant: datetime, now: datetime) -> str:
    """Describe the finish instant relative to now.

    Day boundaries count, not elapsed hours: 23:00 today and 01:00
    tomorrow are "Tomorrow" even though they are two hours apart.
    There is nothing to describe without a batch in progress, so a
    missing finish instant raises ValueError.
    """
    if finish_instant is None:
        raise ValueError("No projected finish: the batch has no start instant")
    delta = days_until(finish_instant, now)
    weekday = finish_instant.strftime("%A")

    if delta > 12:
        return f"{weekday}, {finish_instant:%B} {finish_instant.day}"
    if delta == 0:
        return "Later today"
    if delta == 1:
        return "Tomorrow"

    # Compares weekday indices, not calendar weeks. Kept as observed.
    same_week = _weekday_index(finish_instant) >= _weekday_index(now) and delta < 7
    prefix = "This" if same_week else "Next"
    return f"{prefix} {weekday}"


def format_elapsed(elapsed_days: float) -> str:
    days = math.floor(elapsed_days)
    hours = math.floor((elapsed_days - days) * 24)
    minutes = math.floor(((elapsed_days - days) * 24 - hours) * 60)
    return f"{days}d {hours}h {minutes}m"


def format_elapsed_days(elapsed_days: float) -> str:
    return f"{elapsed_days:.2f}"


def format_progress(progress_percent: float) -> str:
    return f"{progress_percent:.1f}%"
