"""Coaching slot routes, including booking and cancellation."""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from campus_dashboard.core.dependencies import CoachingManagerDep, CurrentUser, StaffUser
from campus_dashboard.core.exceptions import BookingError
from campus_dashboard.schemas.base import ApiSuccess
from campus_dashboard.schemas.coaching_slot import (
    CoachingSlot,
    CreateCoachingSlotRequest,
    DayGroup,
    UpdateCoachingSlotRequest,
)
from campus_dashboard.utils.converters import model_to_coaching_slot, slots_to_day_groups

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/coaching-slots", tags=["Coaching Slots"])


@router.get("", response_model=List[CoachingSlot], summary="List coaching slots")
def list_slots(
    slots: CoachingManagerDep,
    user: CurrentUser,
    course_id: Optional[int] = Query(default=None, alias="courseId"),
    mine: bool = False,
    upcoming: bool = False,
) -> List[CoachingSlot]:
    """List coaching slots ordered by start time.

    Args:
        course_id: Only slots of this course.
        mine: Only slots the current user has booked.
        upcoming: Hide slots that have already ended.
    """
    models = slots.list_slots(
        course_id=course_id,
        participant_id=user.id if mine else None,
        upcoming=upcoming,
    )
    return [model_to_coaching_slot(m) for m in models]


@router.get("/by-day", response_model=List[DayGroup], summary="Coaching slots grouped by day")
def list_slots_by_day(
    slots: CoachingManagerDep,
    user: CurrentUser,
    course_id: Optional[int] = Query(default=None, alias="courseId"),
    upcoming: bool = False,
) -> List[DayGroup]:
    """Group slots by local day, then by start time within each day."""
    return slots_to_day_groups(slots.list_slots(course_id=course_id, upcoming=upcoming))


@router.post(
    "",
    response_model=CoachingSlot,
    status_code=status.HTTP_201_CREATED,
    summary="Create a coaching slot",
)
def create_slot(
    req: CreateCoachingSlotRequest,
    slots: CoachingManagerDep,
    user: StaffUser,
) -> CoachingSlot:
    model = slots.create_slot(
        course_id=req.course_id,
        date=req.date,
        time=req.time,
        end_time=req.end_time,
        max_participants=req.max_participants,
        participant_ids=[p.id for p in req.participants],
        description=req.description,
    )
    return model_to_coaching_slot(model)


@router.get("/{slot_id}", response_model=CoachingSlot, summary="Get a coaching slot")
def get_slot(slot_id: int, slots: CoachingManagerDep, user: CurrentUser) -> CoachingSlot:
    return model_to_coaching_slot(slots.get_slot(slot_id))


@router.put("/{slot_id}", response_model=CoachingSlot, summary="Update a coaching slot")
def update_slot(
    slot_id: int,
    req: UpdateCoachingSlotRequest,
    slots: CoachingManagerDep,
    user: StaffUser,
) -> CoachingSlot:
    model = slots.update_slot(
        slot_id,
        course_id=req.course_id,
        date=req.date,
        time=req.time,
        end_time=req.end_time,
        max_participants=req.max_participants,
        participant_ids=None if req.participants is None else [p.id for p in req.participants],
        description=req.description,
    )
    return model_to_coaching_slot(model)


@router.delete("/{slot_id}", response_model=ApiSuccess, summary="Delete a coaching slot")
def delete_slot(slot_id: int, slots: CoachingManagerDep, user: StaffUser) -> ApiSuccess:
    slots.delete_slot(slot_id)
    return ApiSuccess()


@router.post("/{slot_id}/book", response_model=CoachingSlot, summary="Book a coaching slot")
def book_slot(slot_id: int, slots: CoachingManagerDep, user: CurrentUser) -> CoachingSlot:
    """Book the current user into a slot.

    Raises:
        HTTPException: 400 if the slot is full or already booked, 404 if missing.
    """
    try:
        model = slots.book_slot(slot_id, user)
    except BookingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return model_to_coaching_slot(model)


@router.post("/{slot_id}/cancel", response_model=CoachingSlot, summary="Cancel a booking")
def cancel_booking(slot_id: int, slots: CoachingManagerDep, user: CurrentUser) -> CoachingSlot:
    return model_to_coaching_slot(slots.cancel_booking(slot_id, user))
