"""Session schema definitions.

A session is a scheduled lecture, workshop or coaching meeting. Forms submit
a local calendar date plus ``HH:MM`` start and end times; responses carry the
same fields along with the absolute start/end instants.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from .base import ApiModel
from .user import UserRef

SessionType = Literal["lecture", "workshop", "coaching"]
LocationType = Literal["online", "on_campus"]
Attendance = Literal["mandatory", "optional"]


class Session(ApiModel):
    """Session as returned by the API."""

    id: int
    course_id: int
    type: SessionType
    title: str
    date: str = Field(description="Local calendar date, YYYY-MM-DD.")
    time: str = Field(description="Local start time, HH:MM.")
    end_time: str = Field(description="Local end time, HH:MM.")
    duration: str = Field(description="Human readable duration, e.g. '1h 30m'.")
    start_date_time: datetime
    end_date_time: datetime
    location: str
    location_type: LocationType
    lecturer: Optional[UserRef] = None
    lecturer_id: Optional[int] = None
    attendance: Attendance
    objectives: List[str] = Field(default_factory=list)
    is_live: bool = False
    is_past: bool = False
    group_id: Optional[int] = None


class CreateSessionRequest(ApiModel):
    course_id: int
    type: SessionType = "lecture"
    title: str
    date: str
    time: str
    end_time: str
    location: str
    location_type: LocationType = "on_campus"
    attendance: Attendance = "mandatory"
    objectives: List[str] = Field(default_factory=list)
    is_live: bool = False
    group_id: Optional[int] = None
    lecturer_id: Optional[int] = None


class UpdateSessionRequest(ApiModel):
    course_id: Optional[int] = None
    type: Optional[SessionType] = None
    title: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[str] = None
    location_type: Optional[LocationType] = None
    attendance: Optional[Attendance] = None
    objectives: Optional[List[str]] = None
    is_live: Optional[bool] = None
    group_id: Optional[int] = None
    lecturer_id: Optional[int] = None
