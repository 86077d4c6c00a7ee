"""User management utilities.

This module provides user storage, password hashing, credential checks and
the user directory queries used by the admin screens.
"""

import logging
from datetime import datetime
from typing import List, Optional

import bcrypt
import pytz
from sqlalchemy import func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campus_dashboard.config import BCRYPT_ROUNDS, MIN_PASSWORD_LENGTH
from campus_dashboard.core.exceptions import (
    AuthenticationError,
    RecordNotFoundError,
    UserAlreadyExistsError,
    ValidationError,
)
from campus_dashboard.models.user import UserModel

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password.

    Returns:
        Hashed password (bcrypt hash string).
    """
    password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt hash.

    Args:
        plain_password: Plain text password to verify.
        hashed_password: Bcrypt hash string to verify against.

    Returns:
        True if password matches, False otherwise.
    """
    if not plain_password or not hashed_password:
        return False
    password_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError as e:
        # Malformed hash stored in the database
        logger.error("Password verification error: %s", e)
        return False


def default_initials(name: str) -> str:
    """First two letters of the name, upper-cased."""
    return name.strip()[:2].upper()


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def get_user(self, user_id: int) -> UserModel:
        """Get a user by id.

        Raises:
            RecordNotFoundError: If no such user exists.
        """
        model = self.db.get(UserModel, user_id)
        if model is None:
            raise RecordNotFoundError("User", user_id)
        return model

    def find_user(self, user_id: int) -> Optional[UserModel]:
        return self.db.get(UserModel, user_id)

    def get_user_by_email(self, email: str) -> Optional[UserModel]:
        """Get a user by email address (case-insensitive).

        Args:
            email: Email to look up.

        Returns:
            UserModel if found, None otherwise.
        """
        return (
            self.db.query(UserModel)
            .filter(func.lower(UserModel.email) == email.strip().lower())
            .first()
        )

    def list_users(
        self,
        program: Optional[str] = None,
        search: Optional[str] = None,
        role: Optional[str] = None,
    ) -> List[UserModel]:
        """List users with optional filters.

        Args:
            program: Program filter; ``None`` or ``"all"`` disables it.
            search: Case-insensitive substring matched against name and email.
            role: Role filter.

        Returns:
            Users ordered by name.
        """
        query = self.db.query(UserModel)
        if program and program != "all":
            query = query.filter(UserModel.program == program)
        if role:
            query = query.filter(UserModel.role == role)
        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(
                    func.lower(UserModel.name).like(pattern),
                    func.lower(UserModel.email).like(pattern),
                )
            )
        return query.order_by(UserModel.name, UserModel.id).all()

    def create_user(
        self,
        name: str,
        email: str,
        program: Optional[str],
        role: str = "student",
        initials: Optional[str] = None,
        password: Optional[str] = None,
    ) -> UserModel:
        """Create a new user.

        Args:
            name: Full name.
            email: Unique email address.
            program: Study program ('DTI' or 'DI').
            role: User role ('student', 'professor' or 'admin').
            initials: Display initials; derived from the name when omitted.
            password: Optional initial password.

        Returns:
            Created UserModel.

        Raises:
            ValidationError: If name or email are blank.
            UserAlreadyExistsError: If the email is already taken.
        """
        name = (name or "").strip()
        email = (email or "").strip().lower()
        if not name or not email:
            raise ValidationError("Missing required fields")
        if self.get_user_by_email(email) is not None:
            raise UserAlreadyExistsError(f"User with email '{email}' already exists")

        model = UserModel(
            name=name,
            email=email,
            program=program,
            role=role,
            initials=(initials or "").strip().upper() or default_initials(name),
            password_hash=hash_password(password) if password else None,
        )
        # The unique constraint still catches two concurrent requests
        try:
            self.db.add(model)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise UserAlreadyExistsError(f"User with email '{email}' already exists") from e
        self.db.refresh(model)
        logger.info("Created user %s (%s, role=%s)", model.id, email, role)
        return model

    def update_user(self, user_id: int, **changes) -> UserModel:
        """Apply a partial update to a user.

        Keyword arguments with value ``None`` are ignored.

        Raises:
            RecordNotFoundError: If the user does not exist.
            UserAlreadyExistsError: If the new email belongs to someone else.
        """
        model = self.get_user(user_id)
        email = changes.get("email")
        if email is not None:
            email = email.strip().lower()
            existing = self.get_user_by_email(email)
            if existing is not None and existing.id != model.id:
                raise UserAlreadyExistsError(f"User with email '{email}' already exists")
            changes["email"] = email
        if changes.get("initials") is not None:
            changes["initials"] = changes["initials"].strip().upper()

        for field in ("name", "email", "program", "role", "initials"):
            value = changes.get(field)
            if value is not None:
                setattr(model, field, value)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise UserAlreadyExistsError(f"User with email '{email}' already exists") from e
        self.db.refresh(model)
        logger.info("Updated user %s", user_id)
        return model

    def delete_user(self, user_id: int) -> None:
        model = self.get_user(user_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted user %s", user_id)

    def authenticate(self, email: Optional[str], password: Optional[str]) -> UserModel:
        """Check credentials and record the login time.

        Raises:
            ValidationError: If email or password is missing.
            AuthenticationError: If the credentials do not match.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")
        model = self.get_user_by_email(email)
        if model is None or not verify_password(password, model.password_hash):
            logger.warning("Failed login attempt for %s", email)
            raise AuthenticationError("Invalid email or password")

        # A login is not an edit; keeping updated_at stable keeps feed ETags stable
        self.db.execute(
            update(UserModel)
            .where(UserModel.id == model.id)
            .values(last_logged_in=datetime.now(pytz.utc), updated_at=UserModel.updated_at)
        )
        self.db.commit()
        self.db.refresh(model)
        return model

    def change_password(
        self,
        user_id: int,
        current_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        """Replace a user's password after checking the current one.

        Raises:
            ValidationError: If a field is missing or the new password is too short.
            RecordNotFoundError: If the user has no password set.
            AuthenticationError: If the current password is wrong.
        """
        if not current_password or not new_password:
            raise ValidationError("Current password and new password are required")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        model = self.get_user(user_id)
        if not model.password_hash:
            raise RecordNotFoundError("User or password")
        if not verify_password(current_password, model.password_hash):
            logger.warning("Wrong current password for user %s", user_id)
            raise AuthenticationError("Current password is incorrect")

        model.password_hash = hash_password(new_password)
        self.db.commit()
        logger.info("Changed password for user %s", user_id)
