from sqlalchemy import JSON, Column, DateTime, Integer, String

from .base import Base, utcnow


class CourseModel(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, index=True, nullable=False)
    title = Column(String, nullable=False)
    programs = Column(JSON, nullable=False, default=list)  # e.g. ["DTI", "DI"]
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
