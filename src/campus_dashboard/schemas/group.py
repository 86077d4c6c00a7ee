"""Student group schema definitions."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import ApiModel
from .user import User


class Group(ApiModel):
    """Group as returned by the API."""

    id: int
    course_id: int
    name: str
    description: Optional[str] = None
    max_members: Optional[int] = None
    members: List[User] = Field(default_factory=list)
    is_full: bool = False
    created_at: datetime


class CreateGroupRequest(ApiModel):
    course_id: int
    name: str
    description: Optional[str] = None
    max_members: Optional[int] = Field(default=None, ge=1)


class UpdateGroupRequest(ApiModel):
    course_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    max_members: Optional[int] = Field(default=None, ge=1)
    members: Optional[List[int]] = Field(
        default=None, description="Replacement member list (user ids)."
    )
