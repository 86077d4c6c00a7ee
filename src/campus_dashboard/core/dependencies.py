"""Dependency injection module for FastAPI.

This module provides the request-scoped managers and the authenticated user
for route handlers.
"""

from typing import Annotated, Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from campus_dashboard.core.database import get_db
from campus_dashboard.core.security import (
    bearer_scheme,
    decode_access_token,
    resolve_request_user_id,
)
from campus_dashboard.models.user import UserModel
from campus_dashboard.utils import (
    calendar_manager,
    coaching_manager,
    course_manager,
    group_manager,
    report_manager,
    session_manager,
    user_manager,
)


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_course_manager(db: Session = Depends(get_db)) -> course_manager.CourseManager:
    """Get CourseManager instance with request-scoped DB session."""
    return course_manager.CourseManager(db)


def get_session_manager(db: Session = Depends(get_db)) -> session_manager.SessionManager:
    """Get SessionManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        SessionManager instance.
    """
    return session_manager.SessionManager(db)


def get_coaching_manager(
    db: Session = Depends(get_db),
) -> coaching_manager.CoachingSlotManager:
    """Get CoachingSlotManager instance with request-scoped DB session."""
    return coaching_manager.CoachingSlotManager(db)


def get_group_manager(db: Session = Depends(get_db)) -> group_manager.GroupManager:
    """Get GroupManager instance with request-scoped DB session."""
    return group_manager.GroupManager(db)


def get_report_manager(db: Session = Depends(get_db)) -> report_manager.ReportManager:
    """Get ReportManager instance with request-scoped DB session."""
    return report_manager.ReportManager(db)


def get_calendar_manager(
    db: Session = Depends(get_db),
) -> calendar_manager.CalendarManager:
    """Get CalendarManager instance with request-scoped DB session."""
    return calendar_manager.CalendarManager(db)


def get_current_user(
    request: Request,
    users: user_manager.UserManager = Depends(get_user_manager),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UserModel:
    """Get the authenticated user.

    A Bearer token wins over the cookie session. Otherwise the caller resolved
    by the auth middleware is used; routes outside the protected prefix fall
    back to resolving the request here.

    Raises:
        HTTPException: 401 if the caller is anonymous or the user was deleted.
    """
    if credentials is not None:
        user_id = decode_access_token(credentials.credentials)
    else:
        user_id = getattr(request.state, "auth_user_id", None)
        if user_id is None:
            user_id = resolve_request_user_id(request)
    user = users.find_user(user_id) if user_id is not None else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return user


def require_roles(*roles: str) -> Callable[..., UserModel]:
    """Build a dependency that only admits users with one of ``roles``."""

    def checker(user: UserModel = Depends(get_current_user)) -> UserModel:
        if user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden",
            )
        return user

    return checker


# Type aliases for dependency injection
UserManagerDep = Annotated[user_manager.UserManager, Depends(get_user_manager)]
CourseManagerDep = Annotated[course_manager.CourseManager, Depends(get_course_manager)]
SessionManagerDep = Annotated[
    session_manager.SessionManager, Depends(get_session_manager)
]
CoachingManagerDep = Annotated[
    coaching_manager.CoachingSlotManager, Depends(get_coaching_manager)
]
GroupManagerDep = Annotated[group_manager.GroupManager, Depends(get_group_manager)]
ReportManagerDep = Annotated[report_manager.ReportManager, Depends(get_report_manager)]
CalendarManagerDep = Annotated[
    calendar_manager.CalendarManager, Depends(get_calendar_manager)
]

CurrentUser = Annotated[UserModel, Depends(get_current_user)]
StaffUser = Annotated[UserModel, Depends(require_roles("professor", "admin"))]
AdminUser = Annotated[UserModel, Depends(require_roles("admin"))]
