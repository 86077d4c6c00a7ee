"""Course catalogue routes."""

from typing import List, Optional

from fastapi import APIRouter

from campus_dashboard.core.dependencies import CourseManagerDep, CurrentUser
from campus_dashboard.schemas.course import Course
from campus_dashboard.schemas.user import Program
from campus_dashboard.utils.converters import model_to_course

router = APIRouter(prefix="/api/courses", tags=["Courses"])


@router.get("", response_model=List[Course], summary="List courses")
def list_courses(
    courses: CourseManagerDep,
    user: CurrentUser,
    program: Optional[Program] = None,
) -> List[Course]:
    """List courses, optionally only those offered in ``program``."""
    return [model_to_course(m) for m in courses.list_courses(program)]
