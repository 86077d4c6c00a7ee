"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Column, DateTime, Integer, String

from .base import Base, utcnow


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    initials = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    program = Column(String, nullable=True)  # 'DTI' or 'DI'
    role = Column(String, nullable=False, default="student")  # 'student', 'professor' or 'admin'
    password_hash = Column(String, nullable=True)
    last_logged_in = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
