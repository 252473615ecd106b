from datetime import datetime
from typing import Optional
from sqlalchemy import String, Boolean, ForeignKey, DateTime, Text, Index, JSON
from sqlalchemy.orm import Mapped, mapped_column
from app.database import Base
from app.utils.dates import utcnow


class Notification(Base):
    __tablename__ = "notifications"

    __table_args__ = (
        Index('idx_notification_user_id', 'user_id'),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # Free-form tag, e.g. "new_application", "payment_completed"
    type: Mapped[str] = mapped_column(String, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # References to the entities that caused the notification
    metadata_: Mapped[Optional[dict]] = mapped_column("metadata", JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
