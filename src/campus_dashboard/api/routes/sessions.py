"""Session (lecture/workshop/coaching meeting) routes."""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from campus_dashboard.core.dependencies import (
    CourseManagerDep,
    CurrentUser,
    SessionManagerDep,
    StaffUser,
)
from campus_dashboard.schemas.base import ApiSuccess
from campus_dashboard.schemas.session import (
    CreateSessionRequest,
    Session,
    UpdateSessionRequest,
)
from campus_dashboard.schemas.user import Program
from campus_dashboard.utils.converters import model_to_session

router = APIRouter(prefix="/api/sessions", tags=["Sessions"])


@router.get("", response_model=List[Session], summary="List sessions")
def list_sessions(
    sessions: SessionManagerDep,
    courses: CourseManagerDep,
    user: CurrentUser,
    course_id: Optional[int] = Query(default=None, alias="courseId"),
    program: Optional[Program] = None,
    upcoming: bool = False,
) -> List[Session]:
    """List sessions ordered by start time.

    Args:
        course_id: Only sessions of this course.
        program: Only sessions of courses offered in this program.
        upcoming: Hide sessions that have already ended.
    """
    course_ids = courses.course_ids_for_program(program) if program else None
    models = sessions.list_sessions(course_id=course_id, course_ids=course_ids, upcoming=upcoming)
    return [model_to_session(m) for m in models]


@router.post(
    "",
    response_model=Session,
    status_code=status.HTTP_201_CREATED,
    summary="Create a session",
)
def create_session(
    req: CreateSessionRequest,
    sessions: SessionManagerDep,
    user: StaffUser,
) -> Session:
    """Create a session (professors and admins).

    ``date`` is a local calendar date, ``time``/``endTime`` local ``HH:MM``.
    """
    model = sessions.create_session(**req.model_dump())
    return model_to_session(model)


@router.get("/{session_id}", response_model=Session, summary="Get a session")
def get_session(session_id: int, sessions: SessionManagerDep, user: CurrentUser) -> Session:
    return model_to_session(sessions.get_session(session_id))


@router.put("/{session_id}", response_model=Session, summary="Update a session")
def update_session(
    session_id: int,
    req: UpdateSessionRequest,
    sessions: SessionManagerDep,
    user: StaffUser,
) -> Session:
    model = sessions.update_session(session_id, **req.model_dump(exclude_unset=True))
    return model_to_session(model)


@router.delete("/{session_id}", response_model=ApiSuccess, summary="Delete a session")
def delete_session(session_id: int, sessions: SessionManagerDep, user: StaffUser) -> ApiSuccess:
    sessions.delete_session(session_id)
    return ApiSuccess()
