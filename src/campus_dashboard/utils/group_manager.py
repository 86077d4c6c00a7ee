"""Student group management utilities."""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

import pytz
from sqlalchemy.orm import Session

from campus_dashboard.core.exceptions import BookingError, RecordNotFoundError, ValidationError
from campus_dashboard.models.course import CourseModel
from campus_dashboard.models.group import GroupModel
from campus_dashboard.models.user import UserModel
from campus_dashboard.utils.converters import group_is_full

logger = logging.getLogger(__name__)


def is_member(model: GroupModel, user_id: int) -> bool:
    return any(member.id == user_id for member in model.members)


class GroupManager:
    """Manages student groups and their memberships."""

    def __init__(self, db: Session):
        self.db = db

    def get_group(self, group_id: int) -> GroupModel:
        """Get a group by id.

        Raises:
            RecordNotFoundError: If the group does not exist.
        """
        model = self.db.get(GroupModel, group_id)
        if model is None:
            raise RecordNotFoundError("Group", group_id)
        return model

    def list_groups(
        self, course_id: Optional[int] = None, member_id: Optional[int] = None
    ) -> List[GroupModel]:
        query = self.db.query(GroupModel)
        if course_id is not None:
            query = query.filter(GroupModel.course_id == course_id)
        if member_id is not None:
            query = query.filter(GroupModel.members.any(UserModel.id == member_id))
        return query.order_by(GroupModel.name, GroupModel.id).all()

    def create_group(
        self,
        course_id: int,
        name: str,
        creator: UserModel,
        description: Optional[str] = None,
        max_members: Optional[int] = None,
    ) -> GroupModel:
        """Create a group with the creator as its first member.

        Raises:
            ValidationError: If the name is blank, the course is unknown or
                ``max_members`` is below 1.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Missing required fields")
        if self.db.get(CourseModel, course_id) is None:
            raise ValidationError("Course not found")
        if max_members is not None and max_members < 1:
            raise ValidationError("maxMembers must be at least 1")

        model = GroupModel(
            course_id=course_id,
            name=name,
            description=(description or "").strip() or None,
            max_members=max_members,
            members=[creator],
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("User %s created group %s (%s)", creator.id, model.id, name)
        return model

    def update_group(
        self,
        group_id: int,
        member_ids: Optional[Iterable[int]] = None,
        **changes,
    ) -> GroupModel:
        """Apply a partial update.

        ``None`` values in ``changes`` are left unchanged, except for
        ``max_members`` where an explicit ``None`` makes the group unlimited.

        Raises:
            ValidationError: On unknown course or users, a blank name, or a
                member count above ``max_members``.
        """
        model = self.get_group(group_id)
        course_id = changes.get("course_id")
        name = changes.get("name")
        description = changes.get("description")
        if course_id is not None:
            if self.db.get(CourseModel, course_id) is None:
                raise ValidationError("Course not found")
            model.course_id = course_id
        if name is not None:
            if not name.strip():
                raise ValidationError("Field 'name' cannot be empty")
            model.name = name.strip()
        if description is not None:
            model.description = description.strip() or None
        if member_ids is not None:
            ids = list(dict.fromkeys(member_ids))
            users = self.db.query(UserModel).filter(UserModel.id.in_(ids)).all() if ids else []
            if len(users) != len(ids):
                raise ValidationError("Unknown member id")
            model.members = sorted(users, key=lambda user: user.id)
        if "max_members" in changes:
            model.max_members = changes["max_members"]
        if model.max_members is not None and len(model.members) > model.max_members:
            raise ValidationError("maxMembers cannot be lower than the current member count")

        model.updated_at = datetime.now(pytz.utc)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated group %s", group_id)
        return model

    def delete_group(self, group_id: int) -> None:
        model = self.get_group(group_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted group %s", group_id)

    def join_group(self, group_id: int, user: UserModel) -> GroupModel:
        """Add the user to a group.

        Raises:
            RecordNotFoundError: If the group does not exist.
            BookingError: If the user is already a member or the group is full.
        """
        model = self.get_group(group_id)
        if is_member(model, user.id):
            raise BookingError("Already a member")
        if group_is_full(model):
            raise BookingError("Group is full")

        model.members.append(user)
        model.updated_at = datetime.now(pytz.utc)
        self.db.commit()
        self.db.refresh(model)
        logger.info("User %s joined group %s", user.id, group_id)
        return model

    def leave_group(self, group_id: int, user: UserModel) -> GroupModel:
        """Remove the user from a group; a no-op for non-members."""
        model = self.get_group(group_id)
        if is_member(model, user.id):
            model.members = [m for m in model.members if m.id != user.id]
            model.updated_at = datetime.now(pytz.utc)
            self.db.commit()
            self.db.refresh(model)
            logger.info("User %s left group %s", user.id, group_id)
        return model
