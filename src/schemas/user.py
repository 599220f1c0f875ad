"""User schema definitions.

This module defines the internal User model and the request/response models
used by the authentication routes.
"""

import re
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from schemas.common import CamelModel

EMAIL_PATTERN = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.[A-Za-z]{2,}$")

UserRole = Literal["student", "faculty"]


def normalize_email(email: str) -> str:
    """Lower-case and trim an email address for storage and lookup."""
    return email.strip().lower()


class User(BaseModel):
    """Internal representation of a stored user (includes the password hash)."""

    user_id: str
    name: str
    email: str
    password_hash: str
    role: UserRole = "student"
    college_name: str
    course: Optional[str] = None
    year: Optional[str] = None
    is_verified: bool = True
    saved_papers: List[str] = Field(default_factory=list)
    create_at: Optional[datetime] = None


class UserPublic(CamelModel):
    """User as returned to clients."""

    id: str
    name: str
    email: str
    role: UserRole
    college_name: str
    course: Optional[str] = None
    year: Optional[str] = None
    is_verified: bool = True
    saved_papers: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class RegisterRequest(CamelModel):
    name: str = Field(min_length=1)
    email: str
    password: str = Field(min_length=6)
    role: UserRole = "student"
    college_name: str = Field(min_length=1)
    course: Optional[str] = None
    year: Optional[str] = None

    @field_validator("name", "college_name")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        value = normalize_email(value)
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Please provide a valid email")
        return value

    @model_validator(mode="after")
    def check_student_fields(self):
        if self.role == "student":
            if not (self.course and self.course.strip()) or not (self.year and self.year.strip()):
                raise ValueError("Course and year are required for students")
            self.course = self.course.strip()
            self.year = self.year.strip()
        else:
            # course/year only describe students
            self.course = None
            self.year = None
        return self


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return normalize_email(value)


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str = Field(min_length=6)


class AuthResponse(CamelModel):
    success: bool = True
    token: str
    user: UserPublic


class CurrentUserResponse(CamelModel):
    success: bool = True
    user: UserPublic
