from typing import List

from .base import ApiModel
from .user import Program


class Course(ApiModel):
    """Course as returned by the API."""

    id: int
    code: str
    title: str
    program: List[Program]
