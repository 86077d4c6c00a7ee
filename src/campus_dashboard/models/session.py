"""Scheduled session (lecture, workshop, coaching) model."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class SessionModel(Base):
    """A scheduled lecture/workshop/coaching meeting of a course."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), index=True, nullable=False)
    type = Column(String, nullable=False, default="lecture")
    title = Column(String, nullable=False)
    start_datetime = Column(DateTime(timezone=True), nullable=False, index=True)
    end_datetime = Column(DateTime(timezone=True), nullable=False)
    location = Column(String, nullable=False)
    location_type = Column(String, nullable=False, default="on_campus")
    attendance = Column(String, nullable=False, default="mandatory")
    objectives = Column(JSON, nullable=False, default=list)
    is_live = Column(Boolean, nullable=False, default=False)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="SET NULL"), nullable=True)
    lecturer_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    course = relationship("CourseModel")
    lecturer = relationship("UserModel")
    group = relationship("GroupModel")
