"""Routes for the signed-in user's own account."""

from fastapi import APIRouter, HTTPException, status

from campus_dashboard.core.dependencies import CurrentUser, UserManagerDep
from campus_dashboard.core.exceptions import AuthenticationError
from campus_dashboard.schemas.base import ApiSuccess
from campus_dashboard.schemas.user import ChangePasswordRequest, User
from campus_dashboard.utils.converters import model_to_user

router = APIRouter(prefix="/api", tags=["Account"])


@router.get("/current-user", response_model=User, summary="Get the signed-in user")
def current_user(user: CurrentUser) -> User:
    return model_to_user(user)


@router.post("/change-password", response_model=ApiSuccess, summary="Change password")
def change_password(
    req: ChangePasswordRequest,
    user: CurrentUser,
    users: UserManagerDep,
) -> ApiSuccess:
    """Change the signed-in user's password.

    Raises:
        HTTPException: 400 for missing or too short passwords, 404 when the
            account has no password, 403 when the current password is wrong.
    """
    try:
        users.change_password(user.id, req.current_password, req.new_password)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return ApiSuccess()
