from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.crud import user_crud
from app.models.user import User, UserRole
from app.schema.user_schema import UserResponse, UserUpdate
from app.utils.exceptions import NotFoundError
from app.utils.permissions import authorize
from app.utils.security import get_current_user

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserResponse])
def list_users(
    role: Optional[UserRole] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List all users, optionally by role"""
    return user_crud.get_users(db, role=role)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    user = user_crud.get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    authorize(current_user, "user:read", user)
    return user


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    update_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update own profile (admins may update anyone)"""
    user = user_crud.get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    authorize(current_user, "user:update", user)

    return user_crud.update_user(db, user_id, **update_data.model_dump(exclude_unset=True))
