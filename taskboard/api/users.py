from fastapi import APIRouter, Depends, HTTPException, status
from ..crud import MemStorage
from ..dependencies.auth import get_current_user_id
from ..dependencies.store import get_storage
from ..schemas.user import UserOut

router = APIRouter()


@router.get("/me", response_model=UserOut)
async def read_current_user(
    storage: MemStorage = Depends(get_storage),
    user_id: int = Depends(get_current_user_id),
):
    user = storage.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return UserOut(id=user.id, username=user.username)
