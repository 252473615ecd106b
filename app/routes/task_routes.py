import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.schema.task_schema import TaskCreate, TaskUpdate, TaskResponse
from app.crud import task_crud
from app.utils.exceptions import NotFoundError
from app.utils.permissions import authorize
from app.utils.security import get_current_user
from app.models.task import TaskStatus
from app.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.post("", response_model=TaskResponse, status_code=201)
def create_task(
    task_data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Employer (or admin) posts a task; it starts open"""
    authorize(current_user, "task:create")

    task = task_crud.create_task(db, employer_id=current_user.id, **task_data.model_dump())
    logger.info("Task %s created by user %s (budget=%s)", task.id, current_user.id, task.budget)
    return task


@router.get("", response_model=List[TaskResponse])
def list_tasks(
    status: Optional[TaskStatus] = Query(None),
    employer_id: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """Public task listing"""
    return task_crud.get_tasks(db, status=status, employer_id=employer_id)


@router.get("/employer/mine", response_model=List[TaskResponse])
def get_my_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Tasks posted by the current employer"""
    authorize(current_user, "task:create")
    return task_crud.get_tasks_by_employer(db, current_user.id)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, db: Session = Depends(get_db)):
    task = task_crud.get_task(db, task_id)
    if not task:
        raise NotFoundError("Task not found")
    return task


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Edit task details; status changes only through applications and payments"""
    task = task_crud.get_task(db, task_id)
    if not task:
        raise NotFoundError("Task not found")
    authorize(current_user, "task:update", task)

    return task_crud.update_task(db, task_id, **task_data.model_dump(exclude_unset=True))
