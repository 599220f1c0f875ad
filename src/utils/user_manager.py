"""User management utilities.

This module provides user management functionality including user storage,
password hashing, authentication and the per-user saved-papers set.
"""

import logging
import secrets
from typing import List, Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import (
    PaperNotFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from models.question_paper import QuestionPaperModel
from models.user import SavedPaperModel, UserModel
from schemas.user import User, normalize_email
from utils.converters import model_to_user

logger = logging.getLogger(__name__)

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        try:
            return bcrypt.checkpw(
                _password_bytes(plain_password), hashed_password.encode("utf-8")
            )
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    def create_user(
        self,
        name: str,
        email: str,
        password: str,
        role: str,
        college_name: str,
        course: Optional[str] = None,
        year: Optional[str] = None,
    ) -> User:
        """Create a new user.

        Args:
            name: Display name.
            email: Email address (matched case-insensitively).
            password: Plain text password.
            role: 'student' or 'faculty'.
            college_name: College the user belongs to.
            course: Course (students only).
            year: Year of study (students only).

        Returns:
            Created User object.

        Raises:
            UserAlreadyExistsError: If the email is already registered.
        """
        email = normalize_email(email)
        if self._get_model_by_email(email) is not None:
            raise UserAlreadyExistsError("User already exists")

        model = UserModel(
            user_id=secrets.token_hex(12),
            name=name,
            email=email,
            password_hash=self.hash_password(password),
            role=role,
            college_name=college_name,
            course=course if role == "student" else None,
            year=year if role == "student" else None,
            is_verified=True,
        )

        # Two concurrent registrations can both pass the check above;
        # the unique constraint on email catches the second one.
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise UserAlreadyExistsError("User already exists") from e

        logger.info("Created %s user: %s", role, email)
        return model_to_user(model)

    def _get_model_by_email(self, email: str) -> Optional[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(UserModel.email == normalize_email(email))
            .first()
        )

    def _get_model(self, user_id: str) -> UserModel:
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if model is None:
            raise UserNotFoundError(user_id)
        return model

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address (case-insensitive)."""
        model = self._get_model_by_email(email)
        if model:
            return model_to_user(model)
        return None

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by user ID.

        Args:
            user_id: User ID to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if model:
            return model_to_user(model)
        return None

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user when email and password match, otherwise None."""
        user = self.get_user_by_email(email)
        if user is None or not self.verify_password(password, user.password_hash):
            return None
        return user

    def change_password(
        self, user_id: str, current_password: str, new_password: str
    ) -> bool:
        """Change a user's password.

        The stored hash is only replaced when the password actually changes.

        Args:
            user_id: ID of the user.
            current_password: Password the user claims to have.
            new_password: Replacement password.

        Returns:
            True if the stored hash was replaced, False if unchanged.

        Raises:
            UserNotFoundError: If the user does not exist.
            ValueError: If current_password does not match.
        """
        model = self._get_model(user_id)
        if not self.verify_password(current_password, model.password_hash):
            raise ValueError("Current password is incorrect")
        if self.verify_password(new_password, model.password_hash):
            return False
        model.password_hash = self.hash_password(new_password)
        self.db.commit()
        logger.info("Password changed for user: %s", user_id)
        return True

    def toggle_saved_paper(self, user_id: str, paper_id: str) -> bool:
        """Add the paper to the user's saved set, or remove it if present.

        Performed as a single conditional DELETE, falling back to INSERT,
        so the set never holds duplicates.

        Args:
            user_id: ID of the user whose saved set changes.
            paper_id: ID of the paper.

        Returns:
            True if the paper is saved after the call, False otherwise.

        Raises:
            PaperNotFoundError: If the paper does not exist.
        """
        exists = (
            self.db.query(QuestionPaperModel.paper_id)
            .filter(QuestionPaperModel.paper_id == paper_id)
            .first()
        )
        if exists is None:
            raise PaperNotFoundError(paper_id)

        removed = (
            self.db.query(SavedPaperModel)
            .filter(
                SavedPaperModel.user_id == user_id,
                SavedPaperModel.paper_id == paper_id,
            )
            .delete(synchronize_session=False)
        )
        if removed:
            self.db.commit()
            return False

        try:
            self.db.add(SavedPaperModel(user_id=user_id, paper_id=paper_id))
            self.db.commit()
        except IntegrityError:
            # A concurrent request saved it first
            self.db.rollback()
        return True

    def list_saved_paper_ids(self, user_id: str) -> List[str]:
        rows = (
            self.db.query(SavedPaperModel.paper_id)
            .filter(SavedPaperModel.user_id == user_id)
            .order_by(SavedPaperModel.saved_at)
            .all()
        )
        return [row.paper_id for row in rows]
