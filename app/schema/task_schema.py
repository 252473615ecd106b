from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from app.models.task import TaskStatus
from app.utils.dates import UTCDateTime, as_utc, utcnow


def _validate_future(v: datetime) -> datetime:
    # Naive datetimes are taken as UTC
    v = as_utc(v)
    if v <= utcnow():
        raise ValueError("Deadline must be in the future")
    return v


def _clean_skills(v: List[str]) -> List[str]:
    return [s.strip() for s in v if s and s.strip()]


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=20)
    budget: float = Field(..., gt=0)
    deadline: datetime = Field(
        ...,
        description="Must be in the future at creation time"
    )
    required_skills: List[str] = []

    @field_validator("deadline")
    @classmethod
    def validate_deadline(cls, v: datetime) -> datetime:
        return _validate_future(v)

    @field_validator("title", "description")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Validate that string fields are not empty"""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("required_skills")
    @classmethod
    def clean_skills(cls, v: List[str]) -> List[str]:
        return _clean_skills(v)


class TaskUpdate(BaseModel):
    # Status moves only through the application/payment workflow
    model_config = {"extra": "forbid"}

    title: Optional[str] = Field(None, min_length=5, max_length=200)
    description: Optional[str] = Field(None, min_length=20)
    budget: Optional[float] = Field(None, gt=0)
    deadline: Optional[datetime] = None
    required_skills: Optional[List[str]] = None

    @field_validator("deadline")
    @classmethod
    def validate_deadline(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is None:
            return v
        return _validate_future(v)

    @field_validator("required_skills")
    @classmethod
    def clean_skills(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return _clean_skills(v)


class TaskResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    employer_id: int
    title: str
    description: str
    budget: float
    deadline: UTCDateTime
    required_skills: List[str]
    status: TaskStatus
    created_at: UTCDateTime
