import logging
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
from app.models.badge import Badge, BadgeCategory, BadgeLevel, UserBadge

logger = logging.getLogger(__name__)

# Catalog every fresh store starts with
DEFAULT_BADGES = [
    {"name": "JavaScript", "description": "JavaScript programming skills",
     "category": BadgeCategory.SKILL, "level": BadgeLevel.BEGINNER, "icon": "code"},
    {"name": "UI Design", "description": "User Interface design skills",
     "category": BadgeCategory.SKILL, "level": BadgeLevel.BEGINNER, "icon": "palette"},
    {"name": "Python", "description": "Python programming skills",
     "category": BadgeCategory.SKILL, "level": BadgeLevel.BEGINNER, "icon": "code"},
    {"name": "First Task Completed", "description": "Completed your first task",
     "category": BadgeCategory.ACHIEVEMENT, "level": BadgeLevel.BEGINNER, "icon": "award"},
]


def create_badge(db: Session, **badge_data) -> Badge:
    badge = Badge(**badge_data)
    db.add(badge)
    db.commit()
    db.refresh(badge)
    return badge


def get_badge(db: Session, badge_id: int) -> Optional[Badge]:
    return db.get(Badge, badge_id)


def get_badges(db: Session) -> List[Badge]:
    return db.query(Badge).order_by(Badge.id).all()


def seed_default_badges(db: Session) -> int:
    """Insert the default catalog once; returns how many were created"""
    if db.query(Badge).count() > 0:
        return 0

    for data in DEFAULT_BADGES:
        db.add(Badge(**data))
    db.commit()

    logger.info("Seeded %d default badges", len(DEFAULT_BADGES))
    return len(DEFAULT_BADGES)


def get_user_badge(db: Session, user_id: int, badge_id: int) -> Optional[UserBadge]:
    return db.query(UserBadge).filter(
        UserBadge.user_id == user_id,
        UserBadge.badge_id == badge_id
    ).first()


def award_badge(db: Session, user_id: int, badge_id: int) -> Tuple[UserBadge, bool]:
    """
    Award ``badge_id`` to ``user_id``.

    Idempotent: a badge the user already holds returns the existing
    association. The boolean tells whether a new association was created.
    """
    existing = get_user_badge(db, user_id, badge_id)
    if existing:
        return existing, False

    user_badge = UserBadge(user_id=user_id, badge_id=badge_id)
    db.add(user_badge)
    db.commit()
    db.refresh(user_badge)
    return user_badge, True


def get_user_badges(db: Session, user_id: int) -> List[dict]:
    """Badges a user earned, each with its award time"""
    user_badges = db.query(UserBadge).filter(
        UserBadge.user_id == user_id
    ).order_by(UserBadge.awarded_at, UserBadge.id).all()

    result = []
    for ub in user_badges:
        if ub.badge is None:
            continue
        result.append({
            "id": ub.badge.id,
            "name": ub.badge.name,
            "description": ub.badge.description,
            "category": ub.badge.category,
            "level": ub.badge.level,
            "icon": ub.badge.icon,
            "awarded_at": ub.awarded_at,
        })
    return result
