from pydantic import AliasChoices, BaseModel, Field
from typing import Optional
from app.utils.dates import UTCDateTime


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    type: str
    content: str
    is_read: bool
    created_at: UTCDateTime
    # ORM attribute is metadata_ (metadata is reserved on declarative models)
    metadata: Optional[dict] = Field(None, validation_alias=AliasChoices("metadata_", "metadata"))

    model_config = {"from_attributes": True}


class UnreadCountResponse(BaseModel):
    unread: int
