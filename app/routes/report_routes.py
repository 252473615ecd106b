import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.crud import report_crud, task_crud, user_crud
from app.models.report import ReportStatus
from app.models.user import User, UserRole
from app.schema.report_schema import ReportCreate, ReportResponse, ReportStatusUpdate
from app.services import notifier
from app.utils.exceptions import NotFoundError
from app.utils.permissions import authorize
from app.utils.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.post("", response_model=ReportResponse, status_code=201)
def file_report(
    report_data: ReportCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """File a report against a user and/or a task; every admin is notified"""
    if report_data.reported_user_id is not None and not user_crud.get_user(db, report_data.reported_user_id):
        raise NotFoundError("Reported user not found")
    if report_data.reported_task_id is not None and not task_crud.get_task(db, report_data.reported_task_id):
        raise NotFoundError("Reported task not found")

    report = report_crud.create_report(
        db,
        reporter_id=current_user.id,
        reason=report_data.reason.strip(),
        reported_user_id=report_data.reported_user_id,
        reported_task_id=report_data.reported_task_id
    )
    logger.info("User %s filed report %s", current_user.id, report.id)

    admins = user_crud.get_users_by_role(db, UserRole.ADMIN)
    notifier.notify_many(
        db,
        [admin.id for admin in admins],
        type="new_report",
        content="A new report has been submitted",
        metadata={
            "report_id": report.id,
            "reported_user_id": report.reported_user_id,
            "reported_task_id": report.reported_task_id,
        }
    )

    return report


@router.get("", response_model=List[ReportResponse])
def list_reports(
    status: Optional[ReportStatus] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    authorize(current_user, "report:moderate")
    return report_crud.get_reports(db, status=status)


@router.patch("/{report_id}/status", response_model=ReportResponse)
def update_report_status(
    report_id: int,
    update_data: ReportStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    authorize(current_user, "report:moderate")
    report = report_crud.update_report_status(db, report_id, ReportStatus(update_data.status))
    logger.info("Report %s marked %s by admin %s", report.id, report.status.value, current_user.id)
    return report
