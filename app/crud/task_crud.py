from sqlalchemy.orm import Session
from typing import List, Optional
from app.models.task import Task, TaskStatus
from app.utils.exceptions import NotFoundError, ValidationError


def create_task(db: Session, employer_id: int, **task_data) -> Task:
    task = Task(employer_id=employer_id, status=TaskStatus.OPEN, **task_data)
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def get_task(db: Session, task_id: int) -> Optional[Task]:
    return db.get(Task, task_id)


def get_task_for_update(db: Session, task_id: int) -> Optional[Task]:
    """Row-locks the task on backends that support it (no-op on SQLite)"""
    return db.query(Task).filter(Task.id == task_id).with_for_update().first()


def get_tasks(
    db: Session,
    status: Optional[TaskStatus] = None,
    employer_id: Optional[int] = None
) -> List[Task]:
    query = db.query(Task)

    if status:
        query = query.filter(Task.status == status)

    if employer_id is not None:
        query = query.filter(Task.employer_id == employer_id)

    return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


def get_tasks_by_employer(db: Session, employer_id: int) -> List[Task]:
    return get_tasks(db, employer_id=employer_id)


def update_task(db: Session, task_id: int, **patch) -> Task:
    """Profile-style edit of task details; status is not accepted here"""
    if "status" in patch:
        raise ValidationError("Task status changes go through the task workflow")

    task = get_task(db, task_id)
    if not task:
        raise NotFoundError("Task not found")

    for key, value in patch.items():
        if hasattr(task, key) and value is not None:
            setattr(task, key, value)

    db.commit()
    db.refresh(task)
    return task
