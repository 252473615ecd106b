from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Optional
from app.models.user import User, UserRole
from app.utils.exceptions import NotFoundError, ValidationError
from app.utils.security import hash_password, verify_password


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Case-insensitive lookup"""
    return db.query(User).filter(func.lower(User.username) == username.lower()).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Case-insensitive lookup"""
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def get_users(db: Session, role: Optional[UserRole] = None) -> List[User]:
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    return query.order_by(User.id).all()


def get_users_by_role(db: Session, role: UserRole) -> List[User]:
    return get_users(db, role=role)


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    full_name: str,
    role: UserRole = UserRole.STUDENT,
    skills: Optional[List[str]] = None,
    bio: Optional[str] = None,
    profile_picture: Optional[str] = None
) -> User:
    if get_user_by_username(db, username):
        raise ValidationError("Username already exists")
    if get_user_by_email(db, email):
        raise ValidationError("Email already exists")

    user = User(
        username=username,
        email=email,
        hashed_password=hash_password(password),
        full_name=full_name,
        role=role,
        skills=skills or [],
        bio=bio,
        profile_picture=profile_picture
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user_id: int, **patch) -> User:
    """Shallow merge of ``patch`` over the profile; None values are skipped"""
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    email = patch.get("email")
    if email:
        existing = get_user_by_email(db, email)
        if existing and existing.id != user.id:
            raise ValidationError("Email already exists")

    for key, value in patch.items():
        if hasattr(user, key) and value is not None:
            setattr(user, key, value)

    db.commit()
    db.refresh(user)
    return user


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    user = get_user_by_username(db, username)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user
