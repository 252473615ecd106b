from pydantic import BaseModel, Field, field_validator
from typing import Optional
from app.utils.dates import UTCDateTime


class MessageCreate(BaseModel):
    application_id: int
    # Defaults to the other participant of the application
    receiver_id: Optional[int] = None
    content: str = Field(..., min_length=1, max_length=5000)

    @field_validator("content")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v


class MessageResponse(BaseModel):
    id: int
    application_id: int
    sender_id: int
    receiver_id: int
    content: str
    is_read: bool
    created_at: UTCDateTime

    model_config = {"from_attributes": True}
