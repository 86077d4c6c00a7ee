"""Bug report / feature request routes."""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from campus_dashboard import config
from campus_dashboard.core.dependencies import AdminUser, CurrentUser, ReportManagerDep
from campus_dashboard.schemas.base import ApiSuccess
from campus_dashboard.schemas.report import (
    CreateReportRequest,
    Report,
    ReportStatus,
    ReportType,
    UpdateReportRequest,
)
from campus_dashboard.utils.converters import model_to_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("", response_model=List[Report], summary="List reports")
def list_reports(
    reports: ReportManagerDep,
    admin: AdminUser,
    report_status: Optional[ReportStatus] = Query(default=None, alias="status"),
    report_type: Optional[ReportType] = Query(default=None, alias="type"),
    user_id: Optional[int] = Query(default=None, alias="userId"),
) -> List[Report]:
    """List reports, newest first (admins only)."""
    models = reports.list_reports(status=report_status, report_type=report_type, user_id=user_id)
    return [model_to_report(m) for m in models]


@router.post(
    "",
    response_model=Report,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a report",
)
def create_report(req: CreateReportRequest, reports: ReportManagerDep, user: CurrentUser) -> Report:
    """Submit a bug report or feature request.

    ``type`` must be ``feature_request`` or ``bug_report``; title and
    description are trimmed and must not be empty.
    """
    model = reports.create_report(user.id, req.type, req.title, req.description)
    return model_to_report(model)


@router.patch("/{report_id}", response_model=Report, summary="Update report status")
def update_report(
    report_id: int,
    req: UpdateReportRequest,
    reports: ReportManagerDep,
    admin: AdminUser,
) -> Report:
    return model_to_report(reports.update_status(report_id, req.status))


@router.delete("/{report_id}", response_model=ApiSuccess, summary="Delete a report")
def delete_report(report_id: int, reports: ReportManagerDep, user: CurrentUser) -> ApiSuccess:
    """Delete a report. Only the configured maintainer account may do this."""
    if user.id != config.REPORT_DELETE_USER_ID:
        logger.warning("User %s tried to delete report %s", user.id, report_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not allowed to delete reports",
        )
    reports.delete_report(report_id)
    return ApiSuccess()
