# app/routes/application_routes.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.utils.security import get_current_user
from app.utils.permissions import authorize
from app.utils.exceptions import NotFoundError
from app.models.user import User
from app.models.application import ApplicationStatus
from app.schema.application_schema import (
    ApplicationCreate,
    ApplicationDecision,
    ApplicationResponse,
)
from app.crud import application_crud, task_crud
from app.services import task_workflow

router = APIRouter(prefix="/api/applications", tags=["applications"])


# ===== STUDENT ROUTES =====

@router.post("", response_model=ApplicationResponse, status_code=201)
def apply_to_task(
    application_data: ApplicationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Student applies to a task"""
    return task_workflow.submit_application(
        db,
        student=current_user,
        task_id=application_data.task_id,
        cover_letter=application_data.cover_letter
    )


@router.get("/student", response_model=List[ApplicationResponse])
def get_my_applications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get all applications by the current student"""
    authorize(current_user, "application:list_own")
    return application_crud.get_student_applications(db, current_user.id)


# ===== EMPLOYER ROUTES =====

@router.get("/task/{task_id}", response_model=List[ApplicationResponse])
def get_task_applications(
    task_id: int,
    status: Optional[ApplicationStatus] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get all applications for a task (owner or admin)"""
    task = task_crud.get_task(db, task_id)
    if not task:
        raise NotFoundError("Task not found")
    authorize(current_user, "task:view_applications", task)

    return application_crud.get_task_applications(db, task_id, status=status)


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: int,
    update_data: ApplicationDecision,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Accept or reject an application; accepting rejects the other bids"""
    result = task_workflow.decide_application(
        db,
        actor=current_user,
        application_id=application_id,
        decision=update_data.status
    )
    return result.application


# ===== SHARED =====

@router.get("/{application_id}", response_model=ApplicationResponse)
def get_application_details(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    application = application_crud.get_application(db, application_id)
    if not application:
        raise NotFoundError("Application not found")
    authorize(current_user, "application:read", application)
    return application
