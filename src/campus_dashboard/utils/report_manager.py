"""Bug report / feature request management utilities."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from campus_dashboard.config import REPORT_STATUSES, REPORT_TYPES
from campus_dashboard.core.exceptions import RecordNotFoundError, ValidationError
from campus_dashboard.models.report import ReportModel

logger = logging.getLogger(__name__)


class ReportManager:
    """Manages user-submitted reports."""

    def __init__(self, db: Session):
        self.db = db

    def get_report(self, report_id: int) -> ReportModel:
        model = self.db.get(ReportModel, report_id)
        if model is None:
            raise RecordNotFoundError("Report", report_id)
        return model

    def list_reports(
        self,
        status: Optional[str] = None,
        report_type: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> List[ReportModel]:
        """List reports, newest first.

        Args:
            status: Optional status filter.
            report_type: Optional type filter.
            user_id: Optional author filter.
        """
        query = self.db.query(ReportModel)
        if status:
            query = query.filter(ReportModel.status == status)
        if report_type:
            query = query.filter(ReportModel.type == report_type)
        if user_id is not None:
            query = query.filter(ReportModel.user_id == user_id)
        return query.order_by(ReportModel.created_at.desc(), ReportModel.id.desc()).all()

    def create_report(
        self,
        user_id: int,
        report_type: Optional[str],
        title: Optional[str],
        description: Optional[str],
    ) -> ReportModel:
        """Create an open report.

        Raises:
            ValidationError: If a field is missing or the type is unknown.
        """
        title = (title or "").strip()
        description = (description or "").strip()
        if not report_type or not title or not description:
            raise ValidationError("Missing required fields")
        if report_type not in REPORT_TYPES:
            raise ValidationError(
                f"Invalid type. Must be one of: {', '.join(REPORT_TYPES)}"
            )

        model = ReportModel(
            type=report_type,
            title=title,
            description=description,
            status="open",
            user_id=user_id,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("User %s filed %s report %s", user_id, report_type, model.id)
        return model

    def update_status(self, report_id: int, status: Optional[str]) -> ReportModel:
        """Move a report to another status.

        Raises:
            ValidationError: If the status is missing or not a known value.
            RecordNotFoundError: If the report does not exist.
        """
        if not status:
            raise ValidationError("Status is required")
        if status not in REPORT_STATUSES:
            raise ValidationError(
                f"Invalid status. Must be one of: {', '.join(REPORT_STATUSES)}"
            )
        model = self.get_report(report_id)
        model.status = status
        self.db.commit()
        self.db.refresh(model)
        logger.info("Report %s set to %s", report_id, status)
        return model

    def delete_report(self, report_id: int) -> None:
        model = self.get_report(report_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted report %s", report_id)
