"""Calendar subscription routes.

``/feed.ics`` is outside the auth middleware so that calendar clients can
subscribe with ``?token=``; browsers may instead rely on the cookie session.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Header, Request, Response, status
from fastapi.responses import PlainTextResponse

from campus_dashboard.config import CALENDAR_FEED_FILENAME, CALENDAR_FEED_MAX_AGE
from campus_dashboard.core.dependencies import CalendarManagerDep, CurrentUser, UserManagerDep
from campus_dashboard.core.security import (
    create_calendar_token,
    decode_calendar_token,
    resolve_request_user_id,
)
from campus_dashboard.schemas.calendar import CalendarTokenResponse
from campus_dashboard.utils.timeutils import http_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/calendar", tags=["Calendar"])

ICS_MEDIA_TYPE = "text/calendar; charset=utf-8"


@router.get("/token", response_model=CalendarTokenResponse, summary="Get a calendar feed token")
def calendar_token(user: CurrentUser) -> CalendarTokenResponse:
    """Return the token to embed in the subscription URL of ``/feed.ics``."""
    return CalendarTokenResponse(token=create_calendar_token(user.id))


@router.get(
    "/feed.ics",
    summary="iCalendar feed",
    response_class=Response,
    responses={200: {"content": {"text/calendar": {}}}, 304: {}, 401: {}},
)
def calendar_feed(
    request: Request,
    calendar: CalendarManagerDep,
    users: UserManagerDep,
    token: Optional[str] = None,
    if_none_match: Optional[str] = Header(default=None),
    if_modified_since: Optional[str] = Header(default=None),
) -> Response:
    """Serve the user's sessions and booked coaching slots as iCalendar.

    Authentication uses ``token`` when given, otherwise the cookie session.
    Responds with 304 when the client's validators still match.
    """
    if token:
        user_id = decode_calendar_token(token)
    else:
        user_id = resolve_request_user_id(request)
    user = users.find_user(user_id) if user_id is not None else None
    if user is None:
        logger.info("Rejected calendar feed request without valid credentials")
        return PlainTextResponse(
            "Unauthorized - Please provide a valid token or be logged in",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    feed = calendar.build_feed(user)
    headers = {
        "Cache-Control": f"public, max-age={CALENDAR_FEED_MAX_AGE}, must-revalidate",
        "Last-Modified": http_date(feed.last_modified),
        "ETag": feed.etag,
    }
    if feed.is_not_modified(if_none_match, if_modified_since):
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)

    headers["Content-Disposition"] = f'inline; filename="{CALENDAR_FEED_FILENAME}"'
    headers["X-Content-Type-Options"] = "nosniff"
    return Response(content=feed.body, media_type=ICS_MEDIA_TYPE, headers=headers)
