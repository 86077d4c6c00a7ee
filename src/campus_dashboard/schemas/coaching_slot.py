"""Coaching slot schema definitions."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import ApiModel
from .user import User


class CoachingSlot(ApiModel):
    """CoachingSlot as returned by the API."""

    id: int
    course_id: int
    date: str
    time: str
    end_time: str
    duration: str
    start_date_time: datetime
    end_date_time: datetime
    max_participants: int = Field(description="Participant cap; 0 means unlimited.")
    participants: List[User] = Field(default_factory=list)
    description: Optional[str] = None
    is_full: bool = False
    is_past: bool = False
    created_at: datetime


class ParticipantRef(ApiModel):
    id: int


class CreateCoachingSlotRequest(ApiModel):
    course_id: int
    date: str
    time: str
    end_time: str
    max_participants: int = Field(default=1, ge=0)
    participants: List[ParticipantRef] = Field(default_factory=list)
    description: Optional[str] = None


class UpdateCoachingSlotRequest(ApiModel):
    course_id: Optional[int] = None
    date: Optional[str] = None
    time: Optional[str] = None
    end_time: Optional[str] = None
    max_participants: Optional[int] = Field(default=None, ge=0)
    participants: Optional[List[ParticipantRef]] = None
    description: Optional[str] = None


class TimeGroup(ApiModel):
    time_key: str
    time_label: str
    slots: List[CoachingSlot]


class DayGroup(ApiModel):
    day_key: str
    day_label: str
    date: str
    time_groups: List[TimeGroup]
