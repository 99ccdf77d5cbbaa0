"""Task filtering and summary statistics for the list view.

Everything here is a pure function of its inputs: the same tasks, selector
and ``now`` always give the same result.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional, Sequence, Union

from ..models import Category, Task, TaskPriority, PRIORITY_RANK
from .dates import start_of_day

ALL_CATEGORIES = "all"

CategorySelector = Union[int, str]


class TaskFilter(str, Enum):
    """Named filters offered by the list view."""
    ALL = "all"
    TODAY = "today"
    UPCOMING = "upcoming"
    PRIORITY = "priority"
    COMPLETED = "completed"


@dataclass(frozen=True)
class TaskStats:
    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0
    pending_percent: float = 0.0
    in_progress_percent: float = 0.0
    completed_percent: float = 0.0


@dataclass(frozen=True)
class TaskView:
    tasks: list[Task] = field(default_factory=list)
    stats: TaskStats = field(default_factory=TaskStats)


def filter_by_category(tasks: Iterable[Task], category: CategorySelector) -> list[Task]:
    """Keep tasks in ``category``; the ``"all"`` selector keeps everything."""
    if category == ALL_CATEGORIES:
        return list(tasks)
    return [task for task in tasks if task.category_id == category]


def apply_filter(
    tasks: Iterable[Task],
    name: Union[TaskFilter, str],
    now: Optional[datetime] = None,
) -> list[Task]:
    """Apply a named filter.

    Args:
        tasks: Tasks to filter
        name: One of all, today, upcoming, priority, completed. Unknown
            names behave like ``all``.
        now: Reference instant for the date based filters

    Returns:
        Tasks matching the filter, in input order
    """
    now = now or datetime.now()
    tasks = list(tasks)

    if name == TaskFilter.TODAY:
        today = now.date()
        return [t for t in tasks if t.due_date is not None and t.due_date.date() == today]
    if name == TaskFilter.UPCOMING:
        # Compared by day: anything due today, at any time, is not upcoming
        midnight = start_of_day(now)
        return [t for t in tasks if t.due_date is not None and start_of_day(t.due_date) > midnight]
    if name == TaskFilter.PRIORITY:
        return [t for t in tasks if t.priority == TaskPriority.HIGH]
    if name == TaskFilter.COMPLETED:
        return [t for t in tasks if t.completed]
    return tasks


def sort_for_display(tasks: Iterable[Task]) -> list[Task]:
    """Incomplete tasks first, by priority (high, medium, low); completed last.

    The sort is stable, and completed tasks keep their relative order.
    """
    def key(task: Task):
        if task.completed:
            return (1, 0)
        return (0, PRIORITY_RANK.get(task.priority, PRIORITY_RANK[TaskPriority.MEDIUM]))

    return sorted(tasks, key=key)


def compute_stats(tasks: Sequence[Task]) -> TaskStats:
    """Count and percentage breakdown of ``tasks``.

    ``in_progress`` has no backing state yet and is always 0.
    """
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    pending = sum(1 for t in tasks if not t.completed)
    in_progress = max(0, total - completed - pending)

    def percent(count: int) -> float:
        return (count / total) * 100 if total > 0 else 0.0

    return TaskStats(
        total=total,
        completed=completed,
        pending=pending,
        in_progress=in_progress,
        pending_percent=percent(pending),
        in_progress_percent=percent(in_progress),
        completed_percent=percent(completed),
    )


def build_task_view(
    tasks: Iterable[Task],
    category: CategorySelector = ALL_CATEGORIES,
    filter_name: Union[TaskFilter, str] = TaskFilter.ALL,
    now: Optional[datetime] = None,
) -> TaskView:
    """Visible tasks for a category + filter selection, with their stats."""
    visible = apply_filter(filter_by_category(tasks, category), filter_name, now)
    return TaskView(tasks=sort_for_display(visible), stats=compute_stats(visible))


def count_by_category(tasks: Iterable[Task], categories: Iterable[Category]) -> dict[int, int]:
    """Number of tasks in each existing category.

    Tasks pointing at a deleted category are not counted anywhere.
    """
    counts = {category.id: 0 for category in categories}
    for task in tasks:
        if task.category_id in counts:
            counts[task.category_id] += 1
    return counts
