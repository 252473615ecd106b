from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from app.utils.dates import UTCDateTime
from app.models.user import UserRole

# ----------------- Registration -----------------
class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=3, max_length=200)
    role: UserRole = UserRole.STUDENT
    skills: List[str] = []
    bio: Optional[str] = Field(None, max_length=2000)
    profile_picture: Optional[str] = None

    @field_validator("username", "full_name")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: List[str]) -> List[str]:
        return [s.strip() for s in v if s and s.strip()]

# ----------------- Profile update -----------------
class UserUpdate(BaseModel):
    """Self or admin edits a profile; role and id are not editable"""
    model_config = {"extra": "forbid"}

    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, min_length=3, max_length=200)
    skills: Optional[List[str]] = None
    bio: Optional[str] = Field(None, max_length=2000)
    profile_picture: Optional[str] = None

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return [s.strip() for s in v if s and s.strip()]

# ----------------- User response -----------------
class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    full_name: str
    role: UserRole
    skills: List[str] = []
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    created_at: UTCDateTime

    model_config = {
        "from_attributes": True
    }
