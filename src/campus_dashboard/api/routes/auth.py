"""Authentication routes.

This module handles cookie-session login/logout for the web client and
Bearer token issuing for the mobile app.
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status

from campus_dashboard.core.dependencies import UserManagerDep
from campus_dashboard.core.exceptions import AuthenticationError, ValidationError
from campus_dashboard.core.security import SESSION_USER_KEY, create_access_token
from campus_dashboard.schemas.base import ApiSuccess
from campus_dashboard.schemas.user import LoginRequest, TokenResponse, TokenUser, User
from campus_dashboard.utils.converters import model_to_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _check_credentials(req: LoginRequest, users):
    try:
        return users.authenticate(req.email, req.password)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))


@router.post("/login", response_model=User, summary="Log in with a cookie session")
def login(req: LoginRequest, request: Request, users: UserManagerDep) -> User:
    """Login with email and password.

    On success the user id is stored in the signed session cookie.

    Args:
        req: Login request with email and password.
        request: Incoming request carrying the session.
        users: Injected UserManager instance.

    Returns:
        The logged-in user.

    Raises:
        HTTPException: 400 for missing fields, 401 for wrong credentials.
    """
    user = _check_credentials(req, users)
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id
    logger.info("User %s logged in", user.id)
    return model_to_user(user)


@router.post("/logout", response_model=ApiSuccess, summary="Log out")
def logout(request: Request) -> ApiSuccess:
    """Clear the cookie session. Bearer tokens are dropped client-side."""
    request.session.clear()
    return ApiSuccess()


@router.post("/token", response_model=TokenResponse, summary="Issue a Bearer token")
def issue_token(req: LoginRequest, users: UserManagerDep) -> TokenResponse:
    """Exchange credentials for a long-lived Bearer token (mobile app).

    Args:
        req: Login request with email and password.
        users: Injected UserManager instance.

    Returns:
        TokenResponse with the JWT and basic user information.
    """
    user = _check_credentials(req, users)
    token = create_access_token(user.id, user.email)
    return TokenResponse(
        token=token,
        user=TokenUser(id=str(user.id), email=user.email, name=user.name),
    )
