import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from fastapi.security import OAuth2PasswordRequestForm

from app.database import get_db
from app.crud import user_crud
from app.models.user import User
from app.schema.user_schema import UserCreate, UserResponse
from app.schema.auth_schema import Token, RegisterResponse
from app.utils.exceptions import UnauthorizedError
from app.utils.security import create_user_token, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

# --------------------------
# Registration
# --------------------------
@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    user = user_crud.create_user(
        db,
        username=user_in.username,
        email=user_in.email,
        password=user_in.password,
        full_name=user_in.full_name,
        role=user_in.role,
        skills=user_in.skills,
        bio=user_in.bio,
        profile_picture=user_in.profile_picture
    )
    logger.info("Registered user %s (%s)", user.id, user.role.value)
    return {"user": user, "access_token": create_user_token(user), "token_type": "bearer"}

# --------------------------
# Login
# --------------------------
@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = user_crud.authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise UnauthorizedError("Invalid credentials")
    return {"access_token": create_user_token(user), "token_type": "bearer"}

# --------------------------
# Logout (tokens are stateless; the client drops its token)
# --------------------------
@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    return {"message": "Logged out"}

# --------------------------
# Current user
# --------------------------
@router.get("/user", response_model=UserResponse)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user
