from datetime import datetime
from sqlalchemy import String, ForeignKey, DateTime, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from app.utils.dates import utcnow
import enum


class BadgeCategory(str, enum.Enum):
    SKILL = "skill"
    ACHIEVEMENT = "achievement"


class BadgeLevel(str, enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class Badge(Base):
    __tablename__ = "badges"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[BadgeCategory] = mapped_column(SQLEnum(BadgeCategory), nullable=False)
    level: Mapped[BadgeLevel] = mapped_column(SQLEnum(BadgeLevel), nullable=False)
    icon: Mapped[str] = mapped_column(String, nullable=False)


class UserBadge(Base):
    __tablename__ = "user_badges"

    __table_args__ = (
        UniqueConstraint("user_id", "badge_id", name="uq_user_badge"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    badge_id: Mapped[int] = mapped_column(ForeignKey("badges.id", ondelete="CASCADE"), nullable=False)
    awarded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    badge = relationship("Badge")
