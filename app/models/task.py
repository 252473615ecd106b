from typing import List
from datetime import datetime
from sqlalchemy import String, ForeignKey, DateTime, Float, Text, Index, JSON, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from app.utils.dates import utcnow
import enum


class TaskStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# Forward-only lifecycle: open -> in-progress -> completed
TASK_STATUS_ORDER = [TaskStatus.OPEN, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED]


class Task(Base):
    __tablename__ = "tasks"

    __table_args__ = (
        Index('idx_task_employer_id', 'employer_id'),
        Index('idx_task_status', 'status'),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    employer_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    budget: Mapped[float] = mapped_column(Float, nullable=False)
    deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    required_skills: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)

    # Written only by app.services.task_workflow
    status: Mapped[TaskStatus] = mapped_column(SQLEnum(TaskStatus), default=TaskStatus.OPEN, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    employer = relationship("User")

    applications = relationship(
        "Application",
        back_populates="task",
        order_by="Application.id",
    )
