"""User directory and administration routes."""

from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException, status

from campus_dashboard.core.dependencies import AdminUser, CurrentUser, UserManagerDep
from campus_dashboard.core.exceptions import UserAlreadyExistsError
from campus_dashboard.schemas.base import ApiSuccess
from campus_dashboard.schemas.user import (
    CreateUserRequest,
    UpdateUserRequest,
    User,
    UserRole,
)
from campus_dashboard.utils.converters import model_to_user

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=List[User], summary="List users")
def list_users(
    users: UserManagerDep,
    user: CurrentUser,
    program: Optional[Literal["DTI", "DI", "all"]] = None,
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
) -> List[User]:
    """List users.

    Args:
        program: ``DTI``, ``DI`` or ``all`` (default: all).
        search: Case-insensitive match on name or email.
        role: Only users with this role.
    """
    return [model_to_user(m) for m in users.list_users(program=program, search=search, role=role)]


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
def create_user(req: CreateUserRequest, users: UserManagerDep, admin: AdminUser) -> User:
    """Create a user (admins only).

    Raises:
        HTTPException: 409 if the email is already registered.
    """
    try:
        model = users.create_user(
            name=req.name,
            email=req.email,
            program=req.program,
            role=req.role,
            initials=req.initials,
            password=req.password,
        )
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return model_to_user(model)


@router.get("/{user_id}", response_model=User, summary="Get a user")
def get_user(user_id: int, users: UserManagerDep, user: CurrentUser) -> User:
    return model_to_user(users.get_user(user_id))


@router.put("/{user_id}", response_model=User, summary="Update a user")
def update_user(
    user_id: int,
    req: UpdateUserRequest,
    users: UserManagerDep,
    admin: AdminUser,
) -> User:
    try:
        model = users.update_user(user_id, **req.model_dump(exclude_unset=True))
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return model_to_user(model)


@router.delete("/{user_id}", response_model=ApiSuccess, summary="Delete a user")
def delete_user(user_id: int, users: UserManagerDep, admin: AdminUser) -> ApiSuccess:
    if user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )
    users.delete_user(user_id)
    return ApiSuccess()
