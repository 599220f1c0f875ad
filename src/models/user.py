"""User database model.

This module defines the User database model and the saved-papers association
using SQLAlchemy.
"""

from datetime import datetime

import pytz
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import Base


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    user_id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)  # lower-cased
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default="student")  # 'student' or 'faculty'
    college_name = Column(String, nullable=False)
    course = Column(String, nullable=True)  # students only
    year = Column(String, nullable=True)  # students only
    is_verified = Column(Boolean, nullable=False, default=True)
    create_at = Column(DateTime(timezone=True), default=lambda: datetime.now(pytz.utc))

    saved = relationship(
        "SavedPaperModel",
        cascade="all, delete-orphan",
        order_by="SavedPaperModel.saved_at",
    )


class SavedPaperModel(Base):
    """A paper on a user's saved list. The composite key makes the set unique."""

    __tablename__ = "saved_papers"

    user_id = Column(
        String, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True
    )
    paper_id = Column(
        String,
        ForeignKey("question_papers.paper_id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    saved_at = Column(DateTime(timezone=True), default=lambda: datetime.now(pytz.utc))
