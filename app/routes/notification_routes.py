from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.crud import notification_crud
from app.models.user import User
from app.schema.notification_schema import NotificationResponse, UnreadCountResponse
from app.utils.exceptions import NotFoundError
from app.utils.permissions import authorize
from app.utils.security import get_current_user

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationResponse])
def list_notifications(
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Current user's notifications, newest first"""
    return notification_crud.get_user_notifications(db, current_user.id, unread_only=unread_only)


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return UnreadCountResponse(unread=notification_crud.count_unread(db, current_user.id))


@router.patch("/read-all")
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    updated = notification_crud.mark_all_as_read(db, current_user.id)
    return {"message": "All notifications marked as read", "updated": updated}


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    notification = notification_crud.get_notification(db, notification_id)
    if not notification:
        raise NotFoundError("Notification not found")
    authorize(current_user, "notification:update", notification)
    return notification_crud.mark_notification_as_read(db, notification_id)
