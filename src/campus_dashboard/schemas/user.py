"""User schema definitions."""

from typing import Literal, Optional

from pydantic import Field

from .base import ApiModel

Program = Literal["DTI", "DI"]
UserRole = Literal["student", "professor", "admin"]


class User(ApiModel):
    """User as returned by the API (never includes the password hash)."""

    id: int
    name: str
    initials: str
    email: str
    program: Optional[Program] = None
    role: UserRole = "student"


class UserRef(ApiModel):
    """Simplified user reference used for lecturer displays."""

    name: str
    initials: str


class CreateUserRequest(ApiModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    program: Program
    initials: Optional[str] = None
    role: UserRole = "student"
    password: Optional[str] = Field(
        default=None,
        description="Optional initial password; users without one cannot log in.",
    )


class UpdateUserRequest(ApiModel):
    name: Optional[str] = None
    email: Optional[str] = None
    program: Optional[Program] = None
    initials: Optional[str] = None
    role: Optional[UserRole] = None


class LoginRequest(ApiModel):
    email: Optional[str] = None
    password: Optional[str] = None


class TokenUser(ApiModel):
    id: str
    email: str
    name: str


class TokenResponse(ApiModel):
    token: str
    user: TokenUser


class ChangePasswordRequest(ApiModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None
