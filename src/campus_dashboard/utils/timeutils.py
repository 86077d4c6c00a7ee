"""Date and time helpers.

Forms submit a calendar date and ``HH:MM`` wall-clock times that are meant in
the campus time zone (``CALENDAR_TIMEZONE``). The database stores absolute
UTC instants. These helpers convert between the two and provide the small
calculations the dashboard needs (durations, past checks, day grouping).
"""

import re
from collections import OrderedDict
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

import pytz

from campus_dashboard.config import CALENDAR_TIMEZONE
from campus_dashboard.core.exceptions import ValidationError

T = TypeVar("T")

LOCAL_TZ = pytz.timezone(CALENDAR_TIMEZONE)

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")

GERMAN_WEEKDAYS = [
    "Montag",
    "Dienstag",
    "Mittwoch",
    "Donnerstag",
    "Freitag",
    "Samstag",
    "Sonntag",
]
GERMAN_WEEKDAYS_SHORT = ["Mo", "Di", "Mi", "Do", "Fr", "Sa", "So"]
GERMAN_MONTHS = [
    "Januar",
    "Februar",
    "März",
    "April",
    "Mai",
    "Juni",
    "Juli",
    "August",
    "September",
    "Oktober",
    "November",
    "Dezember",
]


def parse_time(value: str) -> Tuple[int, int]:
    """Parse ``HH:MM`` (seconds tolerated) into an (hour, minute) tuple.

    Raises:
        ValidationError: If the value is not a valid time of day.
    """
    match = _TIME_RE.match((value or "").strip())
    if not match:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")
    return hours, minutes


def parse_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` or an ISO datetime string into a calendar date.

    Datetimes carrying an offset are first moved to the campus time zone so
    that ``2025-10-02T22:00:00Z`` yields the Vienna date 2025-10-03.
    """
    text = (value or "").strip()
    if not text:
        raise ValidationError("Missing date")
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(LOCAL_TZ)
    return parsed.date()


def combine_local(day: date, time_value: str) -> datetime:
    """Combine a local date and ``HH:MM`` into an aware UTC datetime."""
    hours, minutes = parse_time(time_value)
    naive = datetime(day.year, day.month, day.day, hours, minutes)
    return LOCAL_TZ.localize(naive).astimezone(pytz.utc)


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values (SQLite) are taken as UTC."""
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def to_local(value: datetime) -> datetime:
    return as_utc(value).astimezone(LOCAL_TZ)


def format_time(value: datetime) -> str:
    """Local ``HH:MM`` of an instant."""
    return to_local(value).strftime("%H:%M")


def format_date(value: datetime) -> str:
    """Local ``YYYY-MM-DD`` of an instant."""
    return to_local(value).strftime("%Y-%m-%d")


def calculate_duration(start_time: str, end_time: str) -> str:
    """Duration between two ``HH:MM`` strings, e.g. ``"1h 30m"``, ``"2h"``, ``"45m"``."""
    start_h, start_m = parse_time(start_time)
    end_h, end_m = parse_time(end_time)
    diff = (end_h * 60 + end_m) - (start_h * 60 + start_m)
    hours, minutes = divmod(diff, 60)
    if hours > 0 and minutes > 0:
        return f"{hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h"
    return f"{minutes}m"


def resolve_range(
    day: date, start_time: str, end_time: str
) -> Tuple[datetime, datetime]:
    """Turn form values into a validated (start, end) pair of UTC instants.

    Raises:
        ValidationError: If a time is malformed or the end is not after the start.
    """
    start = combine_local(day, start_time)
    end = combine_local(day, end_time)
    if end <= start:
        raise ValidationError("End time must be after start time")
    return start, end


def is_past(end: datetime, now: Optional[datetime] = None) -> bool:
    """True once the end instant lies before ``now``."""
    reference = now or datetime.now(pytz.utc)
    return as_utc(end) < as_utc(reference)


def sort_by_start(items: Iterable[T], key: Callable[[T], datetime] = None) -> List[T]:
    """Sort rows chronologically by their start instant."""
    getter = key or (lambda item: item.start_datetime)
    return sorted(items, key=lambda item: as_utc(getter(item)))


def day_label(value: datetime) -> str:
    """German long day label, e.g. ``"Freitag, 3. Oktober"``."""
    local = to_local(value)
    return f"{GERMAN_WEEKDAYS[local.weekday()]}, {local.day}. {GERMAN_MONTHS[local.month - 1]}"


def date_label(value: datetime) -> str:
    """Short label for dashboard tables, e.g. ``"Fr 3.10.2025"``."""
    local = to_local(value)
    return f"{GERMAN_WEEKDAYS_SHORT[local.weekday()]} {local.day}.{local.month}.{local.year}"


def group_slots_by_day(slots: Sequence) -> List[dict]:
    """Group coaching slots by local day and then by start time.

    Days are returned in chronological order; inside a day, time groups are
    ordered by start time and labelled ``"HH:MM - HH:MM"`` using the end time
    of the first slot in the group.

    Args:
        slots: Objects exposing ``start_datetime`` and ``end_datetime``.

    Returns:
        A list of dicts with ``day_key``, ``day_label``, ``date`` and
        ``time_groups`` (each with ``time_key``, ``time_label``, ``slots``).
    """
    days: "OrderedDict[str, list]" = OrderedDict()
    for slot in sort_by_start(slots):
        days.setdefault(format_date(slot.start_datetime), []).append(slot)

    result = []
    for day_key, day_slots in days.items():
        times: "OrderedDict[str, list]" = OrderedDict()
        for slot in day_slots:
            times.setdefault(format_time(slot.start_datetime), []).append(slot)
        time_groups = [
            {
                "time_key": time_key,
                "time_label": f"{time_key} - {format_time(group[0].end_datetime)}",
                "slots": group,
            }
            for time_key, group in times.items()
        ]
        result.append(
            {
                "day_key": day_key,
                "day_label": day_label(day_slots[0].start_datetime),
                "date": day_key,
                "time_groups": time_groups,
            }
        )
    return result


def http_date(value: datetime) -> str:
    """RFC 7231 date for Last-Modified headers."""
    return as_utc(value).strftime("%a, %d %b %Y %H:%M:%S GMT")


def parse_http_date(value: str) -> Optional[datetime]:
    try:
        return pytz.utc.localize(datetime.strptime(value.strip(), "%a, %d %b %Y %H:%M:%S GMT"))
    except (ValueError, AttributeError):
        return None
