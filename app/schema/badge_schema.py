from pydantic import BaseModel, Field
from app.utils.dates import UTCDateTime
from app.models.badge import BadgeCategory, BadgeLevel


class BadgeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    category: BadgeCategory
    level: BadgeLevel
    icon: str = Field(..., min_length=1, max_length=50)


class BadgeResponse(BaseModel):
    id: int
    name: str
    description: str
    category: BadgeCategory
    level: BadgeLevel
    icon: str

    model_config = {"from_attributes": True}


class BadgeAward(BaseModel):
    user_id: int
    badge_id: int


class UserBadgeResponse(BaseModel):
    id: int
    user_id: int
    badge_id: int
    awarded_at: UTCDateTime

    model_config = {"from_attributes": True}


class EarnedBadgeResponse(BadgeResponse):
    """Catalog badge plus when the user earned it"""
    awarded_at: UTCDateTime
