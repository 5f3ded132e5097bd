"""User management utilities.

This module provides identity lookups, credential checks for login and the
first-admin seed routine.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional

import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from virtuebox.core.exceptions import (
    AccountDeactivatedError,
    EmailAlreadyExistsError,
    InvalidCredentialsError,
)
from virtuebox.models import UserModel
from virtuebox.schemas.user import Role
from virtuebox.utils.password import hash_password, verify_password

logger = logging.getLogger(__name__)


def now_iso() -> str:
    """Current UTC time as a fixed-width ISO string (sorts chronologically)."""
    return datetime.now(pytz.utc).isoformat(timespec="microseconds")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def new_user_id() -> str:
    return uuid.uuid4().hex


class UserManager:
    """Manages user identities and authentication using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def get_user_by_email(self, email: str) -> Optional[UserModel]:
        """Get a user by email (case-insensitive).

        Args:
            email: Email to look up.

        Returns:
            UserModel if found, None otherwise.
        """
        return (
            self.db.query(UserModel)
            .filter(UserModel.email == normalize_email(email))
            .first()
        )

    def get_user_by_id(self, user_id: str) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.user_id == user_id).first()

    def authenticate(self, email: str, password: str) -> UserModel:
        """Check login credentials.

        The password is checked before the active flag so that an account's
        status is only revealed to someone holding its credentials.

        Args:
            email: Login email.
            password: Plain text password.

        Returns:
            The authenticated UserModel.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password
                does not match.
            AccountDeactivatedError: If the account has been deactivated.
        """
        user = self.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt for %s", normalize_email(email))
            raise InvalidCredentialsError()
        if not user.is_active:
            logger.info("Login refused for deactivated account %s", user.email)
            raise AccountDeactivatedError()
        logger.info("User logged in: %s (%s)", user.email, user.role)
        return user

    def create_admin(self, name: str, email: str, password: str) -> UserModel:
        """Create an ADMIN user.

        Raises:
            EmailAlreadyExistsError: If the email is already in use.
        """
        email = normalize_email(email)
        if self.get_user_by_email(email) is not None:
            raise EmailAlreadyExistsError(email)

        now = now_iso()
        model = UserModel(
            user_id=new_user_id(),
            email=email,
            password_hash=hash_password(password),
            name=name.strip(),
            role=Role.ADMIN.value,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.add(model)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise EmailAlreadyExistsError(email) from e
        self.db.refresh(model)
        logger.info("Created admin user: %s", email)
        return model

    def seed_admin(self, name: str, email: str, password: str) -> Optional[UserModel]:
        """Create the first admin unless a user with that email exists.

        Returns:
            The created admin, or None if one already existed.
        """
        existing = self.get_user_by_email(email)
        if existing is not None:
            logger.info("Admin already exists: %s", existing.email)
            return None
        return self.create_admin(name, email, password)
