"""Token helpers and request identity resolution.

Two kinds of signed JWTs exist:

- access tokens (``scope=access``) for the mobile app, sent as
  ``Authorization: Bearer <token>`` and valid for ``ACCESS_TOKEN_EXPIRE_MINUTES``;
- calendar tokens (``scope=calendar``) embedded in feed URLs. They do not
  expire because calendar clients cannot refresh them.

Web clients authenticate with the cookie session instead, which stores the
user id under ``SESSION_USER_KEY``.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from fastapi import Request
from fastapi.security import HTTPBearer
from fastapi.security.utils import get_authorization_scheme_param
from jose import JWTError, jwt

from campus_dashboard.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    JWT_ALGORITHM,
    JWT_SECRET_KEY,
)

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"

ACCESS_SCOPE = "access"
CALENDAR_SCOPE = "calendar"

# Optional so that cookie-authenticated requests pass through
bearer_scheme = HTTPBearer(
    auto_error=False,
    scheme_name="BearerAuth",
    bearerFormat="JWT",
    description="Access token from /api/auth/token (mobile app).",
)


def create_access_token(
    user_id: int, email: str, expires_delta: Optional[timedelta] = None
) -> str:
    """Create a JWT access token.

    Args:
        user_id: Subject of the token.
        email: Included for client convenience.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    expire = datetime.now(pytz.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "scope": ACCESS_SCOPE,
        "exp": expire,
    }
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def create_calendar_token(user_id: int) -> str:
    """Create a non-expiring token that only grants access to the iCal feed."""
    to_encode = {"sub": str(user_id), "scope": CALENDAR_SCOPE}
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def _decode(token: str, scope: str) -> Optional[int]:
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.warning("Rejected %s token: %s", scope, e)
        return None
    if payload.get("scope") != scope:
        return None
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None


def decode_access_token(token: str) -> Optional[int]:
    """Return the user id of a valid access token, or None."""
    return _decode(token, ACCESS_SCOPE)


def decode_calendar_token(token: str) -> Optional[int]:
    """Return the user id of a valid calendar token, or None."""
    return _decode(token, CALENDAR_SCOPE)


def bearer_token(request: Request) -> Optional[str]:
    scheme, credentials = get_authorization_scheme_param(request.headers.get("authorization"))
    if scheme.lower() == "bearer" and credentials:
        return credentials
    return None


def resolve_request_user_id(request: Request) -> Optional[int]:
    """Identify the caller by Bearer token first, then by cookie session.

    Returns:
        The user id, or None when the request is anonymous.
    """
    token = bearer_token(request)
    if token:
        return decode_access_token(token)
    if "session" in request.scope:
        user_id = request.session.get(SESSION_USER_KEY)
        if isinstance(user_id, int):
            return user_id
    return None
