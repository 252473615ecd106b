# app/schema/application_schema.py
from pydantic import BaseModel, Field
from typing import Literal
from app.utils.dates import UTCDateTime
from app.models.application import ApplicationStatus


class ApplicationCreate(BaseModel):
    """Student applies to a task"""
    task_id: int
    cover_letter: str = Field(..., min_length=30, max_length=5000)


class ApplicationDecision(BaseModel):
    """Task owner (or admin) accepts or rejects an application"""
    status: Literal["accepted", "rejected"]


class ApplicationResponse(BaseModel):
    id: int
    task_id: int
    student_id: int
    cover_letter: str
    status: ApplicationStatus
    applied_at: UTCDateTime

    model_config = {"from_attributes": True}
