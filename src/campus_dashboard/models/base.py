"""Declarative base shared by all ORM models."""

from datetime import datetime

import pytz
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current time used for created_at/updated_at columns."""
    return datetime.now(pytz.utc)
