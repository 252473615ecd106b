# app/crud/application_crud.py
from sqlalchemy.orm import Session
from sqlalchemy import and_
from app.models.application import Application, ApplicationStatus
from typing import List, Optional


def create_application(
    db: Session,
    task_id: int,
    student_id: int,
    cover_letter: str
) -> Application:
    """Insert a new application in the applied state (caller checks duplicates)"""
    application = Application(
        task_id=task_id,
        student_id=student_id,
        cover_letter=cover_letter,
        status=ApplicationStatus.APPLIED
    )

    db.add(application)
    db.commit()
    db.refresh(application)

    return application


def get_application(db: Session, application_id: int) -> Optional[Application]:
    return db.get(Application, application_id)


def get_application_by_student_and_task(
    db: Session,
    student_id: int,
    task_id: int
) -> Optional[Application]:
    return db.query(Application).filter(
        and_(
            Application.student_id == student_id,
            Application.task_id == task_id
        )
    ).first()


def get_student_applications(db: Session, student_id: int) -> List[Application]:
    """Get all applications by a student, newest first"""
    return db.query(Application).filter(
        Application.student_id == student_id
    ).order_by(Application.applied_at.desc(), Application.id.desc()).all()


def get_task_applications(
    db: Session,
    task_id: int,
    status: Optional[ApplicationStatus] = None
) -> List[Application]:
    """Get all applications for a task (employer view), oldest first"""
    query = db.query(Application).filter(Application.task_id == task_id)

    if status:
        query = query.filter(Application.status == status)

    return query.order_by(Application.id).all()
