from sqlalchemy.orm import Session
from typing import List, Optional
from app.models.report import Report, ReportStatus
from app.utils.exceptions import NotFoundError


def create_report(
    db: Session,
    reporter_id: int,
    reason: str,
    reported_user_id: Optional[int] = None,
    reported_task_id: Optional[int] = None
) -> Report:
    report = Report(
        reporter_id=reporter_id,
        reported_user_id=reported_user_id,
        reported_task_id=reported_task_id,
        reason=reason,
        status=ReportStatus.PENDING
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    return report


def get_report(db: Session, report_id: int) -> Optional[Report]:
    return db.get(Report, report_id)


def get_reports(db: Session, status: Optional[ReportStatus] = None) -> List[Report]:
    query = db.query(Report)
    if status:
        query = query.filter(Report.status == status)
    return query.order_by(Report.created_at.desc(), Report.id.desc()).all()


def update_report_status(db: Session, report_id: int, status: ReportStatus) -> Report:
    report = get_report(db, report_id)
    if not report:
        raise NotFoundError("Report not found")

    report.status = status
    db.commit()
    db.refresh(report)
    return report
