import asyncio
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from ..dependencies.auth import get_current_user_id
from ..dependencies.store import get_notification_center
from ..models import Notification
from ..schemas.views import NotificationCreate
from ..services.reminders import NotificationCenter

router = APIRouter()


@router.get("", response_model=List[Notification])
async def get_notifications(
    center: NotificationCenter = Depends(get_notification_center),
    user_id: int = Depends(get_current_user_id),
):
    """Visible notifications for the current user, oldest first."""
    return center.active(user_id)


@router.post("", response_model=Notification, status_code=status.HTTP_201_CREATED)
async def add_notification(
    payload: NotificationCreate,
    center: NotificationCenter = Depends(get_notification_center),
    user_id: int = Depends(get_current_user_id),
):
    notification = center.add_custom(
        user_id,
        title=payload.title,
        message=payload.message,
        type=payload.type,
    )
    await center.publish(notification)
    return notification


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def dismiss_notification(
    notification_id: str,
    center: NotificationCenter = Depends(get_notification_center),
    user_id: int = Depends(get_current_user_id),
):
    notification = center.get(notification_id)
    if notification is None or notification.user_id != user_id or not center.dismiss(notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found"
        )
    # Drop the record once the client's exit animation has had time to run
    asyncio.get_running_loop().call_later(
        center.removal_delay.total_seconds() + 0.05, center.purge
    )
