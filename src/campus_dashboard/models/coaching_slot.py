"""Bookable coaching slot model and its participant association table."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Table, Text
from sqlalchemy.orm import relationship

from .base import Base, utcnow

coaching_slot_participants = Table(
    "coaching_slot_participants",
    Base.metadata,
    Column("slot_id", Integer, ForeignKey("coaching_slots.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class CoachingSlotModel(Base):
    __tablename__ = "coaching_slots"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), index=True, nullable=False)
    start_datetime = Column(DateTime(timezone=True), nullable=False, index=True)
    end_datetime = Column(DateTime(timezone=True), nullable=False)
    max_participants = Column(Integer, nullable=False, default=1)  # 0 means unlimited
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    course = relationship("CourseModel")
    participants = relationship(
        "UserModel", secondary=coaching_slot_participants, order_by="UserModel.id"
    )
