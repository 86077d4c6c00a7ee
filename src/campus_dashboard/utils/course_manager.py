"""Course catalogue queries."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from campus_dashboard.models.course import CourseModel

logger = logging.getLogger(__name__)


class CourseManager:
    """Read access to the course catalogue plus the upsert used for seeding."""

    def __init__(self, db: Session):
        self.db = db

    def list_courses(self, program: Optional[str] = None) -> List[CourseModel]:
        """List courses ordered by code, optionally limited to one program.

        ``programs`` is a JSON column, so the program filter runs in Python.
        """
        models = self.db.query(CourseModel).order_by(CourseModel.code).all()
        if program:
            models = [m for m in models if program in (m.programs or [])]
        return models

    def course_ids_for_program(self, program: Optional[str]) -> List[int]:
        if not program:
            return []
        return [m.id for m in self.list_courses(program)]

    def upsert_course(self, code: str, title: str, programs: List[str]) -> CourseModel:
        """Create a course or update the one with the same code."""
        model = self.db.query(CourseModel).filter(CourseModel.code == code).first()
        if model is None:
            model = CourseModel(code=code, title=title, programs=list(programs))
            self.db.add(model)
            logger.info("Created course %s", code)
        else:
            model.title = title
            model.programs = list(programs)
        self.db.commit()
        self.db.refresh(model)
        return model
