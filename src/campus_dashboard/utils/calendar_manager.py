"""iCalendar feed generation.

Builds a subscribable ``text/calendar`` document for one user: the sessions of
every course in the user's program, the sessions the user lectures and the
coaching slots the user has booked. Event times carry a ``TZID`` for the
campus time zone; ``DTSTAMP`` and ``LAST-MODIFIED`` come from the newest
``updated_at`` of the row, its course and its lecturer, so that unchanged
data always renders to the same bytes.
"""

import logging
from datetime import datetime, timedelta
from typing import List, NamedTuple, Optional

import pytz
from icalendar import Calendar, Event, Timezone, TimezoneDaylight, TimezoneStandard
from sqlalchemy.orm import Session

from campus_dashboard.config import (
    CALENDAR_DESCRIPTION,
    CALENDAR_NAME,
    CALENDAR_PRODID,
    CALENDAR_TIMEZONE,
    CALENDAR_UID_DOMAIN,
    CALENDAR_UID_PREFIX,
)
from campus_dashboard.models.coaching_slot import CoachingSlotModel
from campus_dashboard.models.session import SessionModel
from campus_dashboard.models.user import UserModel
from campus_dashboard.utils.coaching_manager import CoachingSlotManager
from campus_dashboard.utils.course_manager import CourseManager
from campus_dashboard.utils.session_manager import SessionManager
from campus_dashboard.utils.timeutils import as_utc, parse_http_date, to_local

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)


class CalendarFeed(NamedTuple):
    """A rendered feed plus the values for its cache headers."""

    body: bytes
    etag: str
    last_modified: datetime
    event_count: int

    def is_not_modified(
        self, if_none_match: Optional[str], if_modified_since: Optional[str]
    ) -> bool:
        """Evaluate conditional request headers against this feed.

        ``If-None-Match`` takes precedence over ``If-Modified-Since``.
        """
        if if_none_match:
            # If-None-Match uses weak comparison, so W/ prefixes are ignored
            candidates = [_strip_weak(tag) for tag in if_none_match.split(",")]
            return "*" in candidates or self.etag in candidates
        if if_modified_since:
            since = parse_http_date(if_modified_since)
            if since is not None:
                return self.last_modified.replace(microsecond=0) <= since
        return False


def _strip_weak(tag: str) -> str:
    tag = tag.strip()
    return tag[2:] if tag.startswith("W/") else tag


def event_uid(kind: str, record_id: int) -> str:
    return f"{CALENDAR_UID_PREFIX}-{kind}-{record_id}@{CALENDAR_UID_DOMAIN}"


def event_sequence(updated_at: datetime) -> int:
    """Monotonic SEQUENCE derived from the modification time in seconds."""
    return int(as_utc(updated_at).timestamp()) % 1_000_000


def build_timezone() -> Timezone:
    """VTIMEZONE for Central European (Summer) Time."""
    tz = Timezone()
    tz.add("tzid", CALENDAR_TIMEZONE)

    standard = TimezoneStandard()
    standard.add("dtstart", datetime(1970, 10, 25, 3, 0, 0))
    standard.add("rrule", {"freq": "yearly", "bymonth": 10, "byday": "-1su"})
    standard.add("tzoffsetfrom", timedelta(hours=2))
    standard.add("tzoffsetto", timedelta(hours=1))
    standard.add("tzname", "CET")
    tz.add_component(standard)

    daylight = TimezoneDaylight()
    daylight.add("dtstart", datetime(1970, 3, 29, 2, 0, 0))
    daylight.add("rrule", {"freq": "yearly", "bymonth": 3, "byday": "-1su"})
    daylight.add("tzoffsetfrom", timedelta(hours=1))
    daylight.add("tzoffsetto", timedelta(hours=2))
    daylight.add("tzname", "CEST")
    tz.add_component(daylight)
    return tz


def modified_at(model) -> datetime:
    """Newest change among an event row and the course and lecturer it shows.

    Course titles and lecturer names are rendered into the event, so editing
    them has to move the feed validators as well.
    """
    related = [model, getattr(model, "course", None), getattr(model, "lecturer", None)]
    return max(as_utc(row.updated_at) for row in related if row is not None)


def _base_event(kind: str, record_id: int, start, end, modified: datetime) -> Event:
    event = Event()
    event.add("uid", event_uid(kind, record_id))
    event.add("dtstamp", modified)
    event.add("dtstart", to_local(start))
    event.add("dtend", to_local(end))
    event.add("status", "CONFIRMED")
    event.add("sequence", event_sequence(modified))
    event.add("last-modified", modified)
    return event


def session_description(model: SessionModel) -> str:
    lines = []
    if model.course is not None:
        lines.append(f"Kurs: {model.course.title}")
    if model.lecturer is not None:
        lines.append(f"Dozent: {model.lecturer.name}")
    attendance = "Pflicht" if model.attendance == "mandatory" else "Optional"
    lines.append(f"Anwesenheit: {attendance}")
    if model.objectives:
        lines.append("\nLernziele:\n" + "\n".join(model.objectives))
    return "\n".join(lines)


def session_to_event(model: SessionModel) -> Event:
    event = _base_event(
        "session", model.id, model.start_datetime, model.end_datetime, modified_at(model)
    )
    event.add("summary", model.title)
    event.add("description", session_description(model))
    event.add("location", model.location)
    return event


def coaching_slot_to_event(model: CoachingSlotModel) -> Event:
    course_title = model.course.title if model.course is not None else ""
    event = _base_event(
        "coaching", model.id, model.start_datetime, model.end_datetime, modified_at(model)
    )
    event.add("summary", f"{course_title} Coaching".strip())
    event.add("description", model.description or f"Coaching-Termin für {course_title}")
    event.add("location", "Online")
    return event


def render_calendar(
    sessions: List[SessionModel], slots: List[CoachingSlotModel]
) -> CalendarFeed:
    """Render sessions and coaching slots into a feed.

    Args:
        sessions: Session rows, already ordered.
        slots: Coaching slot rows, already ordered.

    Returns:
        CalendarFeed with the ``.ics`` bytes and cache validators.
    """
    cal = Calendar()
    cal.add("prodid", CALENDAR_PRODID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "PUBLISH")
    cal.add("x-wr-calname", CALENDAR_NAME)
    cal.add("x-wr-caldesc", CALENDAR_DESCRIPTION)
    cal.add("x-wr-timezone", CALENDAR_TIMEZONE)
    cal.add_component(build_timezone())

    for model in sessions:
        cal.add_component(session_to_event(model))
    for model in slots:
        cal.add_component(coaching_slot_to_event(model))

    stamps = [modified_at(m) for m in list(sessions) + list(slots)]
    last_modified = max(stamps) if stamps else EPOCH
    count = len(stamps)
    etag = f'"{int(last_modified.timestamp() * 1000)}-{count}"'
    return CalendarFeed(
        body=cal.to_ical(),
        etag=etag,
        last_modified=last_modified,
        event_count=count,
    )


class CalendarManager:
    """Collects a user's events and renders them as an iCalendar feed."""

    def __init__(self, db: Session):
        self.db = db
        self.courses = CourseManager(db)
        self.sessions = SessionManager(db)
        self.slots = CoachingSlotManager(db)

    def build_feed(self, user: UserModel) -> CalendarFeed:
        course_ids = self.courses.course_ids_for_program(user.program)
        sessions = self.sessions.list_for_user(user, course_ids)
        slots = self.slots.list_slots(participant_id=user.id)
        feed = render_calendar(sessions, slots)
        logger.debug(
            "Built calendar feed for user %s: %d events, etag=%s",
            user.id,
            feed.event_count,
            feed.etag,
        )
        return feed
