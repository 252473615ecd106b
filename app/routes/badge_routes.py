from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.crud import badge_crud, user_crud
from app.models.user import User
from app.schema.badge_schema import (
    BadgeAward,
    BadgeCreate,
    BadgeResponse,
    EarnedBadgeResponse,
    UserBadgeResponse,
)
from app.services import notifier
from app.utils.exceptions import NotFoundError
from app.utils.permissions import authorize
from app.utils.security import get_current_user

router = APIRouter(prefix="/api/badges", tags=["badges"])


@router.get("", response_model=List[BadgeResponse])
def list_badges(db: Session = Depends(get_db)):
    return badge_crud.get_badges(db)


@router.get("/user/{user_id}", response_model=List[EarnedBadgeResponse])
def get_user_badges(user_id: int, db: Session = Depends(get_db)):
    """Badges a user has earned"""
    if not user_crud.get_user(db, user_id):
        raise NotFoundError("User not found")
    return badge_crud.get_user_badges(db, user_id)


@router.post("", response_model=BadgeResponse, status_code=201)
def create_badge(
    badge_data: BadgeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    authorize(current_user, "badge:manage")
    return badge_crud.create_badge(db, **badge_data.model_dump())


@router.post("/award", response_model=UserBadgeResponse, status_code=201)
def award_badge(
    award_data: BadgeAward,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Award a badge; awarding one the user already holds returns the existing award"""
    authorize(current_user, "badge:manage")

    badge = badge_crud.get_badge(db, award_data.badge_id)
    if not badge:
        raise NotFoundError("Badge not found")
    if not user_crud.get_user(db, award_data.user_id):
        raise NotFoundError("User not found")

    user_badge, created = badge_crud.award_badge(db, award_data.user_id, award_data.badge_id)

    if created:
        notifier.notify(
            db,
            user_id=award_data.user_id,
            type="badge_awarded",
            content=f'You earned the "{badge.name}" badge',
            metadata={"badge_id": badge.id}
        )

    return user_badge
