from pydantic import BaseModel, Field, model_validator
from typing import Literal, Optional
from app.utils.dates import UTCDateTime
from app.models.report import ReportStatus


class ReportCreate(BaseModel):
    reported_user_id: Optional[int] = None
    reported_task_id: Optional[int] = None
    reason: str = Field(..., min_length=1, max_length=2000)

    @model_validator(mode='after')
    def validate_target(self):
        """A report must point at a user, a task, or both"""
        if self.reported_user_id is None and self.reported_task_id is None:
            raise ValueError("reported_user_id or reported_task_id is required")
        if not self.reason.strip():
            raise ValueError("reason cannot be empty")
        return self


class ReportStatusUpdate(BaseModel):
    status: Literal["pending", "resolved", "rejected"]


class ReportResponse(BaseModel):
    id: int
    reporter_id: int
    reported_user_id: Optional[int]
    reported_task_id: Optional[int]
    reason: str
    status: ReportStatus
    created_at: UTCDateTime

    model_config = {"from_attributes": True}
