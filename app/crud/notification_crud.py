from sqlalchemy.orm import Session
from typing import List, Optional
from app.models.notification import Notification
from app.utils.exceptions import NotFoundError


def create_notification(
    db: Session,
    user_id: int,
    type: str,
    content: str,
    metadata: Optional[dict] = None
) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=type,
        content=content,
        metadata_=metadata,
        is_read=False
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def get_notification(db: Session, notification_id: int) -> Optional[Notification]:
    return db.get(Notification, notification_id)


def get_user_notifications(db: Session, user_id: int, unread_only: bool = False) -> List[Notification]:
    """Newest first"""
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read == False)  # noqa: E712
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def count_unread(db: Session, user_id: int) -> int:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read == False  # noqa: E712
    ).count()


def mark_notification_as_read(db: Session, notification_id: int) -> Notification:
    notification = get_notification(db, notification_id)
    if not notification:
        raise NotFoundError("Notification not found")

    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_as_read(db: Session, user_id: int) -> int:
    updated = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read == False  # noqa: E712
    ).update({Notification.is_read: True}, synchronize_session=False)
    db.commit()
    return updated
