"""Report (bug report / feature request) schema definitions."""

from datetime import datetime
from typing import Literal, Optional

from .base import ApiModel
from .user import User

ReportType = Literal["feature_request", "bug_report"]
ReportStatus = Literal["open", "in_progress", "resolved", "closed"]


class Report(ApiModel):
    id: int
    type: ReportType
    title: str
    description: str
    status: ReportStatus
    user_id: int
    user: User
    created_at: datetime
    updated_at: datetime


# Type and status are checked by hand so that clients get a precise message
class CreateReportRequest(ApiModel):
    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None


class UpdateReportRequest(ApiModel):
    status: Optional[str] = None
