from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from ..crud import MemStorage
from ..dependencies.auth import get_current_user_id
from ..dependencies.store import get_storage
from ..models import Category
from ..schemas.category import CategoryCreate, CategoryUpdate

router = APIRouter()


def _category_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Category not found"
    )


@router.get("", response_model=List[Category])
async def get_categories(
    storage: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    return storage.list_categories(user_id)


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    category: CategoryCreate,
    storage: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    return storage.create_category(user_id, name=category.name, icon=category.icon)


@router.put("/{category_id}", response_model=Category)
async def update_category(
    category_id: int,
    category_update: CategoryUpdate,
    storage: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    updated = storage.update_category(
        category_id,
        user_id,
        **category_update.model_dump(exclude_unset=True)
    )
    if not updated:
        raise _category_not_found()
    return updated


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    storage: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    if not storage.delete_category(category_id, user_id):
        raise _category_not_found()
