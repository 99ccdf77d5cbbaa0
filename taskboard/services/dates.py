"""Date helpers shared by the filter engine, schedule grouper and reminders.

All datetimes handled by the service are naive and expressed in local time.
"""

from datetime import datetime, timedelta
from typing import Optional


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def today_start(now: Optional[datetime] = None) -> datetime:
    return start_of_day(now or datetime.now())


def tomorrow_start(now: Optional[datetime] = None) -> datetime:
    return today_start(now) + timedelta(days=1)


def next_week_start(now: Optional[datetime] = None) -> datetime:
    return today_start(now) + timedelta(days=7)


def format_time_until(due: datetime, now: Optional[datetime] = None) -> str:
    """Render the distance from ``now`` to ``due`` as words, e.g. "12 minutes".

    Rounding follows the usual "time ago" conventions: under 30 seconds is
    "less than a minute", minutes round to the nearest whole minute up to 44,
    then hours and days.
    """
    now = now or datetime.now()
    seconds = abs((due - now).total_seconds())
    minutes = int(seconds / 60 + 0.5)

    if seconds < 30:
        return "less than a minute"
    if minutes < 2:
        return "1 minute"
    if minutes < 45:
        return f"{minutes} minutes"
    if minutes < 90:
        return "about 1 hour"
    if minutes < 1440:
        return f"about {int(minutes / 60 + 0.5)} hours"
    if minutes < 2520:
        return "1 day"
    return f"{int(minutes / 1440 + 0.5)} days"
