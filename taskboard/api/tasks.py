from fastapi import APIRouter, Depends, HTTPException, status, Query
from pydantic import ValidationError
from typing import Optional, List
from ..crud import MemStorage
from ..dependencies.auth import get_current_user_id
from ..dependencies.store import get_storage
from ..models import Task
from ..schemas.task import TaskCreate, TaskUpdate


router = APIRouter()


def _task_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Task not found"
    )


def _check_category(storage: MemStorage, category_id: Optional[int], user_id: int) -> None:
    if category_id is not None and storage.get_category(category_id, user_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid task data",
        )


@router.get("", response_model=List[Task])
async def get_tasks(
    q: Optional[str] = Query(None, description="Search by title or description"),
    storage: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    if q:
        return storage.search_tasks(user_id, q)
    return storage.list_tasks(user_id)


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    task: TaskCreate,
    storage: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    _check_category(storage, task.category_id, user_id)
    return storage.create_task(user_id, **task.model_dump())


@router.get("/{task_id}", response_model=Task)
async def get_task(
    task_id: int,
    storage: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    task = storage.get_task(task_id, user_id)
    if not task:
        raise _task_not_found()
    return task


@router.put("/{task_id}", response_model=Task)
async def update_task(
    task_id: int,
    task_update: TaskUpdate,
    storage: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    existing = storage.get_task(task_id, user_id)
    if existing is None:
        raise _task_not_found()
    updates = task_update.model_dump(exclude_unset=True)
    # A dangling category left behind by a deleted category may be re-sent as is
    if updates.get("category_id") != existing.category_id:
        _check_category(storage, updates.get("category_id"), user_id)
    try:
        updated_task = storage.update_task(task_id, user_id, **updates)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid task data",
        ) from e
    if not updated_task:
        raise _task_not_found()
    return updated_task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    storage: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    if not storage.delete_task(task_id, user_id):
        raise _task_not_found()


@router.patch("/{task_id}/toggle-complete", response_model=Task)
async def toggle_task_complete(
    task_id: int,
    storage: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    task = storage.toggle_complete(task_id, user_id)
    if not task:
        raise _task_not_found()
    return task
