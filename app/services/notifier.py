"""
Best-effort notification side channel.

Callers commit their own state first; a failure here is rolled back,
logged and swallowed so it can never undo or fail the operation that
triggered it.
"""
import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.crud import notification_crud
from app.models.notification import Notification

logger = logging.getLogger(__name__)


def notify(
    db: Session,
    user_id: int,
    type: str,
    content: str,
    metadata: Optional[dict] = None
) -> Optional[Notification]:
    try:
        return notification_crud.create_notification(
            db,
            user_id=user_id,
            type=type,
            content=content,
            metadata=metadata
        )
    except Exception:
        db.rollback()
        logger.exception("Failed to create %s notification for user %s", type, user_id)
        return None


def notify_many(
    db: Session,
    user_ids: Iterable[int],
    type: str,
    content: str,
    metadata: Optional[dict] = None
) -> int:
    """Send the same notification to several users; returns how many were stored"""
    sent = 0
    for user_id in user_ids:
        if notify(db, user_id, type, content, metadata) is not None:
            sent += 1
    return sent
