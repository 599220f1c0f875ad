"""Custom exception classes for the ExamVerse API.

Every exception carries the HTTP status it maps to; the handlers registered in
``app.py`` turn them into the ``{"success": false, "message": ...}`` envelope.
"""

from typing import Optional


class ExamVerseError(Exception):
    """Base exception for all ExamVerse errors."""

    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None):
        """Initialize the exception.

        Args:
            message: Human readable message returned to the client.
            error: Optional underlying error detail (e.g. provider message).
        """
        self.message = message
        self.error = error
        super().__init__(message)


class ValidationError(ExamVerseError):
    """Raised when request data is missing or invalid."""

    status_code = 400


class FileTooLargeError(ValidationError):
    """Raised when an uploaded file exceeds the size limit."""

    status_code = 413


class AuthError(ExamVerseError):
    """Raised when the bearer token is missing or invalid."""

    status_code = 401


class ForbiddenError(ExamVerseError):
    """Raised on a role or ownership mismatch."""

    status_code = 403


class NotFoundError(ExamVerseError):
    """Raised when an identifier does not resolve."""

    status_code = 404


class PaperNotFoundError(NotFoundError):
    """Raised when a requested question paper cannot be found."""

    def __init__(self, paper_id: str):
        self.paper_id = paper_id
        super().__init__("Question paper not found")


class UserNotFoundError(NotFoundError):
    """Raised when a requested user cannot be found."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("User not found")


class UserAlreadyExistsError(ValidationError):
    """Raised when registering an email that is already taken."""

    pass


class UpstreamError(ExamVerseError):
    """Raised when the AI or video provider fails."""

    status_code = 500
