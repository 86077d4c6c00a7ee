"""Conversion helpers between ORM rows and API schemas.

Rows store absolute UTC instants; the API additionally exposes the local
calendar date, ``HH:MM`` times, a readable duration and past/full flags.
"""

from typing import Optional

from campus_dashboard.models.coaching_slot import CoachingSlotModel
from campus_dashboard.models.course import CourseModel
from campus_dashboard.models.group import GroupModel
from campus_dashboard.models.report import ReportModel
from campus_dashboard.models.session import SessionModel
from campus_dashboard.models.user import UserModel
from campus_dashboard.schemas.coaching_slot import CoachingSlot, DayGroup
from campus_dashboard.schemas.course import Course
from campus_dashboard.schemas.group import Group
from campus_dashboard.schemas.report import Report
from campus_dashboard.schemas.session import Session
from campus_dashboard.schemas.user import User, UserRef
from campus_dashboard.utils.timeutils import (
    as_utc,
    calculate_duration,
    format_date,
    format_time,
    group_slots_by_day,
    is_past,
)


def model_to_user(model: UserModel) -> User:
    return User.model_validate(model)


def model_to_user_ref(model: Optional[UserModel]) -> Optional[UserRef]:
    if model is None:
        return None
    return UserRef(name=model.name, initials=model.initials)


def model_to_course(model: CourseModel) -> Course:
    return Course(
        id=model.id,
        code=model.code,
        title=model.title,
        program=list(model.programs or []),
    )


def model_to_session(model: SessionModel) -> Session:
    """Convert a SessionModel to the Session response schema."""
    start_time = format_time(model.start_datetime)
    end_time = format_time(model.end_datetime)
    return Session(
        id=model.id,
        course_id=model.course_id,
        type=model.type,
        title=model.title,
        date=format_date(model.start_datetime),
        time=start_time,
        end_time=end_time,
        duration=calculate_duration(start_time, end_time),
        start_date_time=as_utc(model.start_datetime),
        end_date_time=as_utc(model.end_datetime),
        location=model.location,
        location_type=model.location_type,
        lecturer=model_to_user_ref(model.lecturer),
        lecturer_id=model.lecturer_id,
        attendance=model.attendance,
        objectives=list(model.objectives or []),
        is_live=bool(model.is_live),
        is_past=is_past(model.end_datetime),
        group_id=model.group_id,
    )


def slot_is_full(model: CoachingSlotModel) -> bool:
    """A slot with ``max_participants == 0`` never fills up."""
    return model.max_participants > 0 and len(model.participants) >= model.max_participants


def group_is_full(model: GroupModel) -> bool:
    return model.max_members is not None and len(model.members) >= model.max_members


def model_to_coaching_slot(model: CoachingSlotModel) -> CoachingSlot:
    """Convert a CoachingSlotModel to the CoachingSlot response schema."""
    start_time = format_time(model.start_datetime)
    end_time = format_time(model.end_datetime)
    return CoachingSlot(
        id=model.id,
        course_id=model.course_id,
        date=format_date(model.start_datetime),
        time=start_time,
        end_time=end_time,
        duration=calculate_duration(start_time, end_time),
        start_date_time=as_utc(model.start_datetime),
        end_date_time=as_utc(model.end_datetime),
        max_participants=model.max_participants,
        participants=[model_to_user(user) for user in model.participants],
        description=model.description,
        is_full=slot_is_full(model),
        is_past=is_past(model.end_datetime),
        created_at=as_utc(model.created_at),
    )


def slots_to_day_groups(models) -> list:
    """Group slot rows by day and start time, converting each slot."""
    return [
        DayGroup(
            day_key=day["day_key"],
            day_label=day["day_label"],
            date=day["date"],
            time_groups=[
                {
                    "time_key": group["time_key"],
                    "time_label": group["time_label"],
                    "slots": [model_to_coaching_slot(slot) for slot in group["slots"]],
                }
                for group in day["time_groups"]
            ],
        )
        for day in group_slots_by_day(models)
    ]


def model_to_group(model: GroupModel) -> Group:
    return Group(
        id=model.id,
        course_id=model.course_id,
        name=model.name,
        description=model.description,
        max_members=model.max_members,
        members=[model_to_user(user) for user in model.members],
        is_full=group_is_full(model),
        created_at=as_utc(model.created_at),
    )


def model_to_report(model: ReportModel) -> Report:
    return Report(
        id=model.id,
        type=model.type,
        title=model.title,
        description=model.description,
        status=model.status,
        user_id=model.user_id,
        user=model_to_user(model.user),
        created_at=as_utc(model.created_at),
        updated_at=as_utc(model.updated_at),
    )
