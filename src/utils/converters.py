"""Conversions between ORM models and API schemas."""

from datetime import datetime
from typing import Optional

import pytz

from models.question_paper import AISolutionModel, QuestionModel, QuestionPaperModel
from models.user import UserModel
from schemas.paper import (
    PaperInfo,
    QuestionAISolution,
    QuestionInfo,
    SolutionLogEntry,
    UploaderInfo,
)
from schemas.user import User, UserPublic


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite drops the timezone)."""
    if value is not None and value.tzinfo is None:
        return pytz.utc.localize(value)
    return value


def model_to_user(model: UserModel) -> User:
    return User(
        user_id=model.user_id,
        name=model.name,
        email=model.email,
        password_hash=model.password_hash,
        role=model.role,
        college_name=model.college_name,
        course=model.course,
        year=model.year,
        is_verified=model.is_verified,
        saved_papers=[s.paper_id for s in model.saved],
        create_at=as_utc(model.create_at),
    )


def user_to_public(user: User) -> UserPublic:
    return UserPublic(
        id=user.user_id,
        name=user.name,
        email=user.email,
        role=user.role,
        college_name=user.college_name,
        course=user.course,
        year=user.year,
        is_verified=user.is_verified,
        saved_papers=user.saved_papers,
        created_at=user.create_at,
    )


def question_to_info(model: QuestionModel) -> QuestionInfo:
    return QuestionInfo(
        id=model.question_id,
        question_number=model.question_number,
        question_text=model.question_text,
        marks=model.marks,
        ai_solution=QuestionAISolution(
            answer=model.ai_answer,
            generated_at=as_utc(model.ai_generated_at),
            is_generated=bool(model.ai_is_generated),
        ),
    )


def solution_to_entry(model: AISolutionModel) -> SolutionLogEntry:
    return SolutionLogEntry(
        id=model.solution_id,
        question=model.question,
        answer=model.answer,
        generated_at=as_utc(model.generated_at),
    )


def paper_to_info(
    model: QuestionPaperModel, include_uploader_college: bool = False
) -> PaperInfo:
    """Build the wire representation of a paper.

    Args:
        model: Loaded paper model.
        include_uploader_college: Whether to expose the uploader's college
            (single-paper views only).

    Returns:
        PaperInfo with the uploader summary embedded.
    """
    uploader = model.uploader
    return PaperInfo(
        id=model.paper_id,
        title=model.title,
        subject=model.subject,
        year=model.year,
        exam_type=model.exam_type,
        college_name=model.college_name,
        course=model.course,
        uploaded_by=UploaderInfo(
            id=uploader.user_id,
            name=uploader.name,
            email=uploader.email,
            college_name=uploader.college_name if include_uploader_college else None,
        ),
        pdf_url=model.pdf_url,
        pdf_file_name=model.pdf_file_name,
        solution_text=model.solution_text or "",
        has_faculty_solution=model.has_faculty_solution,
        questions=[question_to_info(q) for q in model.questions],
        ai_generated_solutions=[solution_to_entry(s) for s in model.ai_solutions],
        views=model.views,
        downloads=model.downloads,
        upvotes=model.upvotes,
        upvoted_by=model.upvoted_by,
        created_at=as_utc(model.created_at),
    )
