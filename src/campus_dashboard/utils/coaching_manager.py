"""Coaching slot management and booking utilities."""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

import pytz
from sqlalchemy.orm import Session

from campus_dashboard.config import DEFAULT_MAX_PARTICIPANTS
from campus_dashboard.core.exceptions import BookingError, RecordNotFoundError, ValidationError
from campus_dashboard.models.coaching_slot import CoachingSlotModel
from campus_dashboard.models.course import CourseModel
from campus_dashboard.models.user import UserModel
from campus_dashboard.utils.converters import slot_is_full
from campus_dashboard.utils.timeutils import format_date, format_time, parse_date, resolve_range

logger = logging.getLogger(__name__)


class CoachingSlotManager:
    """Manages coaching slots and their participant bookings."""

    def __init__(self, db: Session):
        self.db = db

    def get_slot(self, slot_id: int) -> CoachingSlotModel:
        """Get a coaching slot by id.

        Raises:
            RecordNotFoundError: If the slot does not exist.
        """
        model = self.db.get(CoachingSlotModel, slot_id)
        if model is None:
            raise RecordNotFoundError("Coaching slot", slot_id)
        return model

    def list_slots(
        self,
        course_id: Optional[int] = None,
        participant_id: Optional[int] = None,
        upcoming: bool = False,
    ) -> List[CoachingSlotModel]:
        """List slots ordered by start time.

        Args:
            course_id: Only slots of this course.
            participant_id: Only slots this user has booked.
            upcoming: Drop slots that have already ended.
        """
        query = self.db.query(CoachingSlotModel)
        if course_id is not None:
            query = query.filter(CoachingSlotModel.course_id == course_id)
        if participant_id is not None:
            query = query.filter(
                CoachingSlotModel.participants.any(UserModel.id == participant_id)
            )
        if upcoming:
            query = query.filter(CoachingSlotModel.end_datetime >= datetime.now(pytz.utc))
        return query.order_by(CoachingSlotModel.start_datetime, CoachingSlotModel.id).all()

    def _load_users(self, user_ids: Iterable[int]) -> List[UserModel]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return []
        users = self.db.query(UserModel).filter(UserModel.id.in_(ids)).all()
        found = {user.id for user in users}
        missing = [user_id for user_id in ids if user_id not in found]
        if missing:
            raise ValidationError(f"Unknown participant id(s): {', '.join(map(str, missing))}")
        return sorted(users, key=lambda user: user.id)

    @staticmethod
    def _check_capacity(max_participants: int, participant_count: int) -> None:
        if max_participants > 0 and participant_count > max_participants:
            raise ValidationError("More participants than maxParticipants allows")

    def create_slot(
        self,
        course_id: int,
        date: str,
        time: str,
        end_time: str,
        max_participants: Optional[int] = None,
        participant_ids: Iterable[int] = (),
        description: Optional[str] = None,
    ) -> CoachingSlotModel:
        """Create a coaching slot.

        Args:
            course_id: Course the slot belongs to.
            date: Local calendar date.
            time: Local start time ``HH:MM``.
            end_time: Local end time ``HH:MM``.
            max_participants: Participant cap, 0 for unlimited.
            participant_ids: Users booked right away.
            description: Optional free text.

        Raises:
            ValidationError: On bad times, unknown course or participants, or
                more initial participants than the cap allows.
        """
        if self.db.get(CourseModel, course_id) is None:
            raise ValidationError("Course not found")
        start, end = resolve_range(parse_date(date), time, end_time)
        if max_participants is None:
            max_participants = DEFAULT_MAX_PARTICIPANTS
        if max_participants < 0:
            raise ValidationError("maxParticipants must be 0 (unlimited) or greater")
        participants = self._load_users(participant_ids)
        self._check_capacity(max_participants, len(participants))

        model = CoachingSlotModel(
            course_id=course_id,
            start_datetime=start,
            end_datetime=end,
            max_participants=max_participants,
            description=(description or "").strip() or None,
            participants=participants,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created coaching slot %s for course %s", model.id, course_id)
        return model

    def update_slot(
        self,
        slot_id: int,
        course_id: Optional[int] = None,
        date: Optional[str] = None,
        time: Optional[str] = None,
        end_time: Optional[str] = None,
        max_participants: Optional[int] = None,
        participant_ids: Optional[Iterable[int]] = None,
        description: Optional[str] = None,
    ) -> CoachingSlotModel:
        """Apply a partial update; ``None`` arguments are left unchanged."""
        model = self.get_slot(slot_id)
        if course_id is not None:
            if self.db.get(CourseModel, course_id) is None:
                raise ValidationError("Course not found")
            model.course_id = course_id
        if date or time or end_time:
            day = parse_date(date) if date else parse_date(format_date(model.start_datetime))
            model.start_datetime, model.end_datetime = resolve_range(
                day,
                time or format_time(model.start_datetime),
                end_time or format_time(model.end_datetime),
            )
        if max_participants is not None:
            if max_participants < 0:
                raise ValidationError("maxParticipants must be 0 (unlimited) or greater")
            model.max_participants = max_participants
        if participant_ids is not None:
            model.participants = self._load_users(participant_ids)
        if description is not None:
            model.description = description.strip() or None
        self._check_capacity(model.max_participants, len(model.participants))

        model.updated_at = datetime.now(pytz.utc)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated coaching slot %s", slot_id)
        return model

    def delete_slot(self, slot_id: int) -> None:
        model = self.get_slot(slot_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted coaching slot %s", slot_id)

    def book_slot(self, slot_id: int, user: UserModel) -> CoachingSlotModel:
        """Book the user into a slot.

        Raises:
            RecordNotFoundError: If the slot does not exist.
            BookingError: If the slot is full or the user already booked it.
        """
        model = self.get_slot(slot_id)
        if slot_is_full(model):
            raise BookingError("Slot is full")
        if any(p.id == user.id for p in model.participants):
            raise BookingError("Already booked")

        model.participants.append(user)
        model.updated_at = datetime.now(pytz.utc)
        self.db.commit()
        self.db.refresh(model)
        logger.info("User %s booked coaching slot %s", user.id, slot_id)
        return model

    def cancel_booking(self, slot_id: int, user: UserModel) -> CoachingSlotModel:
        """Remove the user from a slot; a no-op when they were not booked."""
        model = self.get_slot(slot_id)
        remaining = [p for p in model.participants if p.id != user.id]
        if len(remaining) != len(model.participants):
            model.participants = remaining
            model.updated_at = datetime.now(pytz.utc)
            self.db.commit()
            self.db.refresh(model)
            logger.info("User %s cancelled coaching slot %s", user.id, slot_id)
        return model
