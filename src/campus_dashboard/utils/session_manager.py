"""Session (lecture/workshop/coaching meeting) management utilities."""

import logging
from datetime import datetime
from typing import List, Optional

import pytz
from sqlalchemy import or_
from sqlalchemy.orm import Session

from campus_dashboard.core.exceptions import RecordNotFoundError, ValidationError
from campus_dashboard.models.course import CourseModel
from campus_dashboard.models.group import GroupModel
from campus_dashboard.models.session import SessionModel
from campus_dashboard.models.user import UserModel
from campus_dashboard.utils.timeutils import format_date, format_time, parse_date, resolve_range

logger = logging.getLogger(__name__)

# Columns that can be copied from a request as they are
_PLAIN_FIELDS = (
    "course_id",
    "type",
    "title",
    "location",
    "location_type",
    "attendance",
    "objectives",
    "is_live",
    "group_id",
    "lecturer_id",
)

# An explicit null detaches these references
_NULLABLE_FIELDS = ("group_id", "lecturer_id")


class SessionManager:
    """Manages scheduled sessions using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize SessionManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def get_session(self, session_id: int) -> SessionModel:
        """Get a session by id.

        Raises:
            RecordNotFoundError: If the session does not exist.
        """
        model = self.db.get(SessionModel, session_id)
        if model is None:
            raise RecordNotFoundError("Session", session_id)
        return model

    def list_sessions(
        self,
        course_id: Optional[int] = None,
        course_ids: Optional[List[int]] = None,
        upcoming: bool = False,
    ) -> List[SessionModel]:
        """List sessions ordered by start time.

        Args:
            course_id: Only sessions of this course.
            course_ids: Only sessions of these courses (program filter).
            upcoming: Drop sessions that have already ended.

        Returns:
            Matching SessionModel rows.
        """
        query = self.db.query(SessionModel)
        if course_id is not None:
            query = query.filter(SessionModel.course_id == course_id)
        if course_ids is not None:
            query = query.filter(SessionModel.course_id.in_(course_ids))
        if upcoming:
            query = query.filter(SessionModel.end_datetime >= datetime.now(pytz.utc))
        return query.order_by(SessionModel.start_datetime, SessionModel.id).all()

    def list_for_user(self, user: UserModel, course_ids: List[int]) -> List[SessionModel]:
        """Sessions of the given courses plus the ones the user lectures."""
        conditions = [SessionModel.lecturer_id == user.id]
        if course_ids:
            conditions.append(SessionModel.course_id.in_(course_ids))
        return (
            self.db.query(SessionModel)
            .filter(or_(*conditions))
            .order_by(SessionModel.start_datetime, SessionModel.id)
            .all()
        )

    def _check_references(self, values: dict) -> None:
        if "course_id" in values and self.db.get(CourseModel, values["course_id"]) is None:
            raise ValidationError("Course not found")
        if values.get("group_id") is not None and self.db.get(GroupModel, values["group_id"]) is None:
            raise ValidationError("Group not found")
        if values.get("lecturer_id") is not None and self.db.get(UserModel, values["lecturer_id"]) is None:
            raise ValidationError("Lecturer not found")

    def create_session(
        self,
        course_id: int,
        title: str,
        date: str,
        time: str,
        end_time: str,
        location: str,
        **fields,
    ) -> SessionModel:
        """Create a session from form values.

        ``date`` is a local calendar date and ``time``/``end_time`` are local
        ``HH:MM`` strings; they are stored as UTC instants.

        Raises:
            ValidationError: On blank fields, bad times, end before start or
                unknown course/group/lecturer.
        """
        title = (title or "").strip()
        location = (location or "").strip()
        if not title or not location:
            raise ValidationError("Missing required fields")
        start, end = resolve_range(parse_date(date), time, end_time)

        values = {k: v for k, v in fields.items() if k in _PLAIN_FIELDS and v is not None}
        values.update(course_id=course_id, title=title, location=location)
        self._check_references(values)

        model = SessionModel(start_datetime=start, end_datetime=end, **values)
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created session %s (%s) for course %s", model.id, title, course_id)
        return model

    def update_session(self, session_id: int, **changes) -> SessionModel:
        """Apply a partial update.

        ``None`` leaves a field unchanged, except for ``group_id`` and
        ``lecturer_id`` where it clears the reference. Missing parts of the
        date/time triple are taken from the stored row.
        """
        model = self.get_session(session_id)
        values = {
            k: v
            for k, v in changes.items()
            if k in _PLAIN_FIELDS and (v is not None or k in _NULLABLE_FIELDS)
        }
        for field in ("title", "location"):
            if field in values:
                values[field] = values[field].strip()
                if not values[field]:
                    raise ValidationError(f"Field '{field}' cannot be empty")
        self._check_references(values)

        date_value = changes.get("date")
        time_value = changes.get("time")
        end_value = changes.get("end_time")
        if date_value or time_value or end_value:
            day = parse_date(date_value) if date_value else parse_date(format_date(model.start_datetime))
            start, end = resolve_range(
                day,
                time_value or format_time(model.start_datetime),
                end_value or format_time(model.end_datetime),
            )
            model.start_datetime = start
            model.end_datetime = end

        for field, value in values.items():
            setattr(model, field, value)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated session %s", session_id)
        return model

    def delete_session(self, session_id: int) -> None:
        model = self.get_session(session_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted session %s", session_id)
