"""Derived, read-only views over the task collection."""

from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, status, Query
from ..crud import MemStorage
from ..dependencies.auth import get_current_user_id
from ..dependencies.store import get_storage
from ..schemas.views import TaskStatsOut, TaskViewOut, UpcomingScheduleOut
from ..services.filters import (
    ALL_CATEGORIES,
    TaskFilter,
    build_task_view,
    count_by_category,
)
from ..services.schedule import group_upcoming

router = APIRouter()


def _parse_category(raw: str):
    if raw == ALL_CATEGORIES:
        return ALL_CATEGORIES
    try:
        return int(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="category must be 'all' or a category id"
        )


@router.get("/tasks", response_model=TaskViewOut)
async def task_view(
    category: str = Query(ALL_CATEGORIES, description="'all' or a category id"),
    filter: TaskFilter = Query(TaskFilter.ALL),
    storage: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    """List view: visible tasks in display order plus summary stats."""
    tasks = storage.list_tasks(user_id)
    view = build_task_view(tasks, _parse_category(category), filter)
    return TaskViewOut(
        tasks=view.tasks,
        stats=TaskStatsOut(**asdict(view.stats)),
        category_counts=count_by_category(tasks, storage.list_categories(user_id)),
    )


@router.get("/schedule", response_model=UpcomingScheduleOut)
async def upcoming_schedule(
    storage: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    schedule = group_upcoming(storage.list_tasks(user_id))
    return UpcomingScheduleOut(
        tomorrow_date=schedule.tomorrow_date,
        next_week_date=schedule.next_week_date,
        tomorrow=schedule.tomorrow,
        next_week=schedule.next_week,
        later=schedule.later,
    )
