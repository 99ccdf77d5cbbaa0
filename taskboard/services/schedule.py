"""Upcoming schedule: buckets incomplete, dated tasks by day."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from ..models import Task
from .dates import start_of_day, tomorrow_start, next_week_start

LATER_LIMIT = 3


@dataclass(frozen=True)
class UpcomingSchedule:
    """Tasks due tomorrow, exactly one week out, and after that.

    Attributes:
        tomorrow_date: Midnight of tomorrow
        next_week_date: Midnight seven days from today
        tomorrow: Tasks due tomorrow
        next_week: Tasks due on ``next_week_date`` itself (a single day)
        later: Earliest tasks due after ``next_week_date``
    """
    tomorrow_date: datetime
    next_week_date: datetime
    tomorrow: list[Task] = field(default_factory=list)
    next_week: list[Task] = field(default_factory=list)
    later: list[Task] = field(default_factory=list)


def group_upcoming(
    tasks: Iterable[Task],
    now: Optional[datetime] = None,
    later_limit: int = LATER_LIMIT,
) -> UpcomingSchedule:
    """Group tasks into the tomorrow / next week / later buckets.

    Completed tasks and tasks without a due date are left out. Each bucket is
    sorted by due date, and ``later`` keeps only the first ``later_limit``.
    """
    now = now or datetime.now()
    tomorrow = tomorrow_start(now)
    next_week = next_week_start(now)

    dated = sorted(
        (t for t in tasks if t.due_date is not None and not t.completed),
        key=lambda t: t.due_date,
    )

    schedule = UpcomingSchedule(tomorrow_date=tomorrow, next_week_date=next_week)
    for task in dated:
        day = start_of_day(task.due_date)
        if day == tomorrow:
            schedule.tomorrow.append(task)
        elif day == next_week:
            schedule.next_week.append(task)
        elif day > next_week and len(schedule.later) < later_limit:
            schedule.later.append(task)
    return schedule
