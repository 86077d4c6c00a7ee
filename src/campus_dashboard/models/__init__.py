"""ORM models.

Importing this package registers every table with ``Base.metadata``.
"""

from .base import Base
from .user import UserModel
from .course import CourseModel
from .group import GroupModel, group_members
from .session import SessionModel
from .coaching_slot import CoachingSlotModel, coaching_slot_participants
from .report import ReportModel

__all__ = [
    "Base",
    "UserModel",
    "CourseModel",
    "GroupModel",
    "group_members",
    "SessionModel",
    "CoachingSlotModel",
    "coaching_slot_participants",
    "ReportModel",
]
