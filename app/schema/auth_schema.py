# app/schema/auth_schema.py
from pydantic import BaseModel
from app.schema.user_schema import UserResponse

# ----------------- Tokens -----------------
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

# ----------------- Registration -----------------
class RegisterResponse(BaseModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
