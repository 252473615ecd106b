"""
Task and application lifecycle.

Task:        open -> in-progress -> completed   (forward only)
Application: applied -> accepted | rejected

This module is the only writer of ``Task.status`` and
``Application.status``. Each operation commits its state changes in one
transaction and only then emits notifications, which are best-effort.
"""
import logging
from dataclasses import dataclass, field
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud import application_crud, payment_crud, task_crud
from app.models.application import Application, ApplicationStatus
from app.models.payment import Payment, PaymentStatus
from app.models.task import TASK_STATUS_ORDER, Task, TaskStatus
from app.models.user import User
from app.services import notifier
from app.utils.exceptions import (
    DuplicateApplicationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from app.utils.permissions import authorize

logger = logging.getLogger(__name__)

DECISIONS = (ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED)


@dataclass
class DecisionResult:
    application: Application
    task: Task
    cascade_rejected: List[Application] = field(default_factory=list)


@dataclass
class PaymentResult:
    payment: Payment
    task: Task
    application: Application


def _advance_task(task: Task, target: TaskStatus) -> None:
    """Move a task forward in its lifecycle; staying put is allowed, going back is not"""
    current = TASK_STATUS_ORDER.index(task.status)
    wanted = TASK_STATUS_ORDER.index(target)
    if wanted < current:
        raise InvalidStateError(
            f"Task is already {task.status.value} and cannot move back to {target.value}"
        )
    if wanted > current + 1:
        raise InvalidStateError(
            f"Task cannot skip from {task.status.value} to {target.value}"
        )
    task.status = target


def _load_application_and_task(db: Session, application_id: int, lock: bool = False):
    application = application_crud.get_application(db, application_id)
    if not application:
        raise NotFoundError("Application not found")

    if lock:
        task = task_crud.get_task_for_update(db, application.task_id)
    else:
        task = task_crud.get_task(db, application.task_id)
    if not task:
        raise NotFoundError("Task not found")

    return application, task


# ===== SUBMIT =====

def submit_application(db: Session, student: User, task_id: int, cover_letter: str) -> Application:
    """Student bids on a task in any status; the employer is notified"""
    authorize(student, "application:create")

    task = task_crud.get_task(db, task_id)
    if not task:
        raise NotFoundError("Task not found")

    if application_crud.get_application_by_student_and_task(db, student.id, task_id):
        raise DuplicateApplicationError()

    try:
        application = application_crud.create_application(
            db,
            task_id=task_id,
            student_id=student.id,
            cover_letter=cover_letter
        )
    except IntegrityError:
        # Lost a race against a concurrent submit for the same pair
        db.rollback()
        raise DuplicateApplicationError()

    logger.info("Student %s applied to task %s (application %s)", student.id, task_id, application.id)

    notifier.notify(
        db,
        user_id=task.employer_id,
        type="new_application",
        content=f'New application received for "{task.title}"',
        metadata={"task_id": task.id, "application_id": application.id}
    )

    return application


# ===== DECIDE =====

def decide_application(db: Session, actor: User, application_id: int, decision) -> DecisionResult:
    """
    Accept or reject an application.

    Accepting moves the task to in-progress and rejects every sibling
    application still in ``applied``. Re-deciding an application that was
    already decided is permitted and re-runs the cascade.
    """
    try:
        decision = ApplicationStatus(decision)
    except ValueError:
        raise ValidationError("Invalid status")
    if decision not in DECISIONS:
        raise ValidationError("Invalid status")

    application, task = _load_application_and_task(db, application_id, lock=True)
    authorize(actor, "application:decide", task)

    if application.status != ApplicationStatus.APPLIED:
        logger.warning(
            "Application %s re-decided: %s -> %s",
            application.id, application.status.value, decision.value
        )

    cascade: List[Application] = []
    try:
        application.status = decision

        if decision == ApplicationStatus.ACCEPTED:
            _advance_task(task, TaskStatus.IN_PROGRESS)

            for sibling in application_crud.get_task_applications(db, task.id):
                if sibling.id != application.id and sibling.status == ApplicationStatus.APPLIED:
                    sibling.status = ApplicationStatus.REJECTED
                    cascade.append(sibling)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(application)
    db.refresh(task)

    logger.info(
        "Application %s %s by user %s; task %s is %s; %d sibling(s) auto-rejected",
        application.id, decision.value, actor.id, task.id, task.status.value, len(cascade)
    )

    for sibling in cascade:
        notifier.notify(
            db,
            user_id=sibling.student_id,
            type="application_rejected",
            content=f'Your application for "{task.title}" has been rejected',
            metadata={"task_id": task.id, "application_id": sibling.id}
        )

    notifier.notify(
        db,
        user_id=application.student_id,
        type=f"application_{decision.value}",
        content=f'Your application for "{task.title}" has been {decision.value}',
        metadata={"task_id": task.id, "application_id": application.id}
    )

    return DecisionResult(application=application, task=task, cascade_rejected=cascade)


# ===== PAYMENT =====

def confirm_payment(
    db: Session,
    application_id: int,
    amount: float,
    reference: str = "manual"
) -> PaymentResult:
    """
    Record a completed payment for an accepted application and complete the task.

    One payment completes the task; there are no installments.
    """
    if amount is None or amount <= 0:
        raise ValidationError("Amount must be greater than zero")

    application, task = _load_application_and_task(db, application_id, lock=True)

    if task.status != TaskStatus.IN_PROGRESS:
        raise InvalidStateError("Cannot mark payment for a task that is not in progress")

    try:
        payment = payment_crud.create_payment(
            db,
            application_id=application.id,
            amount=amount,
            status=PaymentStatus.COMPLETED,
            commit=False
        )
        _advance_task(task, TaskStatus.COMPLETED)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(payment)
    db.refresh(task)

    logger.info(
        "Payment %s of %s recorded for application %s (ref=%s); task %s completed",
        payment.id, amount, application.id, reference, task.id
    )

    notifier.notify(
        db,
        user_id=application.student_id,
        type="payment_completed",
        content=f'Payment of ₹{amount:g} received for "{task.title}"',
        metadata={
            "task_id": task.id,
            "application_id": application.id,
            "payment_id": payment.id,
            "reference_id": reference,
        }
    )

    return PaymentResult(payment=payment, task=task, application=application)
