"""Question paper management utilities.

This module provides CRUD and engagement operations over question papers.
Counters and toggles are written as single atomic statements so that
concurrent requests cannot leave ``upvotes`` out of step with the upvoter set
or lose view/download increments.
"""

import logging
import secrets
from datetime import datetime
from typing import List, Optional, Tuple

import pytz
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from core.exceptions import ForbiddenError, PaperNotFoundError
from models.question_paper import (
    AISolutionModel,
    PaperUpvoteModel,
    QuestionModel,
    QuestionPaperModel,
)
from models.user import SavedPaperModel
from schemas.paper import QuestionInput
from schemas.user import User
from utils.file_storage import PaperFileStorage

logger = logging.getLogger(__name__)


def _icontains(column, value: str):
    # Literal substring match; % and _ in user input are escaped
    return func.lower(column).contains(value.lower(), autoescape=True)


class PaperManager:
    """Manages question paper persistence and engagement using SQLAlchemy."""

    def __init__(self, db: Session, file_storage: Optional[PaperFileStorage] = None):
        """Initialize PaperManager.

        Args:
            db: SQLAlchemy Session.
            file_storage: Storage holding the uploaded PDFs; required for delete.
        """
        self.db = db
        self.file_storage = file_storage

    def _query(self):
        return self.db.query(QuestionPaperModel).options(
            selectinload(QuestionPaperModel.uploader),
            selectinload(QuestionPaperModel.questions),
            selectinload(QuestionPaperModel.ai_solutions),
            selectinload(QuestionPaperModel.upvoters),
        )

    def _ensure_exists(self, paper_id: str) -> None:
        exists = (
            self.db.query(QuestionPaperModel.paper_id)
            .filter(QuestionPaperModel.paper_id == paper_id)
            .first()
        )
        if exists is None:
            raise PaperNotFoundError(paper_id)

    def get_paper(self, paper_id: str) -> QuestionPaperModel:
        """Load a paper with its questions, solution log and upvoters.

        Raises:
            PaperNotFoundError: If the paper does not exist.
        """
        paper = self._query().filter(QuestionPaperModel.paper_id == paper_id).first()
        if paper is None:
            raise PaperNotFoundError(paper_id)
        return paper

    def find_paper(self, paper_id: str) -> Optional[QuestionPaperModel]:
        """Like get_paper but returns None instead of raising."""
        try:
            return self.get_paper(paper_id)
        except PaperNotFoundError:
            return None

    def list_papers(
        self,
        college_name: Optional[str] = None,
        course: Optional[str] = None,
        year: Optional[str] = None,
        subject: Optional[str] = None,
        exam_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[QuestionPaperModel]:
        """List papers matching every supplied filter, newest first.

        Args:
            college_name: Exact college name.
            course: Exact course.
            year: Exact year.
            subject: Case-insensitive substring of the subject.
            exam_type: Exact exam type.
            search: Case-insensitive substring of the title or the subject.

        Returns:
            Matching papers; empty list when nothing matches.
        """
        query = self._query()
        if college_name:
            query = query.filter(QuestionPaperModel.college_name == college_name)
        if course:
            query = query.filter(QuestionPaperModel.course == course)
        if year:
            query = query.filter(QuestionPaperModel.year == year)
        if subject:
            query = query.filter(_icontains(QuestionPaperModel.subject, subject))
        if exam_type:
            query = query.filter(QuestionPaperModel.exam_type == exam_type)
        if search:
            query = query.filter(
                or_(
                    _icontains(QuestionPaperModel.title, search),
                    _icontains(QuestionPaperModel.subject, search),
                )
            )
        return query.order_by(QuestionPaperModel.created_at.desc()).all()

    def record_view(self, paper_id: str) -> QuestionPaperModel:
        """Count one view and return the refreshed paper.

        Every call counts; the increment is committed before returning.

        Raises:
            PaperNotFoundError: If the paper does not exist.
        """
        updated = (
            self.db.query(QuestionPaperModel)
            .filter(QuestionPaperModel.paper_id == paper_id)
            .update(
                {QuestionPaperModel.views: QuestionPaperModel.views + 1},
                synchronize_session=False,
            )
        )
        if not updated:
            self.db.rollback()
            raise PaperNotFoundError(paper_id)
        self.db.commit()
        return self.get_paper(paper_id)

    def create_paper(
        self,
        owner: User,
        title: str,
        subject: str,
        year: str,
        course: str,
        pdf_url: str,
        pdf_file_name: str,
        exam_type: str = "college",
        solution_text: Optional[str] = None,
        questions: Optional[List[QuestionInput]] = None,
    ) -> QuestionPaperModel:
        """Create a paper owned by ``owner``.

        The college is always taken from the owner's profile.

        Returns:
            The created paper, fully loaded.
        """
        solution_text = solution_text or ""
        paper = QuestionPaperModel(
            paper_id=secrets.token_hex(12),
            title=title,
            subject=subject,
            year=year,
            exam_type=exam_type or "college",
            college_name=owner.college_name,
            course=course,
            uploaded_by=owner.user_id,
            pdf_url=pdf_url,
            pdf_file_name=pdf_file_name,
            solution_text=solution_text,
            has_faculty_solution=bool(solution_text),
            views=0,
            downloads=0,
            created_at=datetime.now(pytz.utc),
        )
        for position, question in enumerate(questions or []):
            paper.questions.append(
                QuestionModel(
                    position=position,
                    question_number=question.question_number,
                    question_text=question.question_text,
                    marks=question.marks,
                    ai_is_generated=False,
                )
            )
        self.db.add(paper)
        self.db.commit()
        logger.info(
            "Created paper %s (%s, %d questions) by %s",
            paper.paper_id,
            title,
            len(paper.questions),
            owner.user_id,
        )
        return self.get_paper(paper.paper_id)

    def _check_owner(self, paper: QuestionPaperModel, user_id: str, action: str) -> None:
        if paper.uploaded_by != user_id:
            raise ForbiddenError(f"Not authorized to {action} this paper")

    def update_paper(
        self,
        paper_id: str,
        user_id: str,
        title: Optional[str] = None,
        subject: Optional[str] = None,
        year: Optional[str] = None,
        solution_text: Optional[str] = None,
    ) -> QuestionPaperModel:
        """Update the mutable fields of a paper owned by ``user_id``.

        Omitted title/subject/year keep their value. solutionText is always
        replaced (omitted clears it) and hasFacultySolution follows it.

        Raises:
            PaperNotFoundError: If the paper does not exist.
            ForbiddenError: If the caller is not the uploader.
        """
        paper = self.get_paper(paper_id)
        self._check_owner(paper, user_id, "update")

        if title is not None:
            paper.title = title
        if subject is not None:
            paper.subject = subject
        if year is not None:
            paper.year = year
        paper.solution_text = solution_text or ""
        paper.has_faculty_solution = bool(paper.solution_text)
        self.db.commit()
        logger.info("Updated paper %s", paper_id)
        return self.get_paper(paper_id)

    def delete_paper(self, paper_id: str, user_id: str) -> None:
        """Delete a paper owned by ``user_id`` together with its stored file.

        Raises:
            PaperNotFoundError: If the paper does not exist.
            ForbiddenError: If the caller is not the uploader.
        """
        paper = self.get_paper(paper_id)
        self._check_owner(paper, user_id, "delete")

        if self.file_storage is not None:
            self.file_storage.delete(paper.pdf_url)

        self.db.query(SavedPaperModel).filter(
            SavedPaperModel.paper_id == paper_id
        ).delete(synchronize_session=False)
        self.db.delete(paper)
        self.db.commit()
        logger.info("Deleted paper %s", paper_id)

    def increment_downloads(self, paper_id: str) -> int:
        """Count one download and return the new total.

        Raises:
            PaperNotFoundError: If the paper does not exist.
        """
        updated = (
            self.db.query(QuestionPaperModel)
            .filter(QuestionPaperModel.paper_id == paper_id)
            .update(
                {QuestionPaperModel.downloads: QuestionPaperModel.downloads + 1},
                synchronize_session=False,
            )
        )
        if not updated:
            self.db.rollback()
            raise PaperNotFoundError(paper_id)
        downloads = (
            self.db.query(QuestionPaperModel.downloads)
            .filter(QuestionPaperModel.paper_id == paper_id)
            .scalar()
        )
        self.db.commit()
        return downloads

    def count_upvotes(self, paper_id: str) -> int:
        return (
            self.db.query(func.count(PaperUpvoteModel.user_id))
            .filter(PaperUpvoteModel.paper_id == paper_id)
            .scalar()
        )

    def toggle_upvote(self, paper_id: str, user_id: str) -> Tuple[int, bool]:
        """Flip the caller's membership in the paper's upvoter set.

        Removal is a single conditional DELETE; if nothing was removed the
        upvote is INSERTed, and the composite primary key rejects a concurrent
        duplicate. The count is always read from the set itself.

        Returns:
            Tuple of (upvotes after the toggle, whether the caller now upvotes).

        Raises:
            PaperNotFoundError: If the paper does not exist.
        """
        self._ensure_exists(paper_id)

        removed = (
            self.db.query(PaperUpvoteModel)
            .filter(
                PaperUpvoteModel.paper_id == paper_id,
                PaperUpvoteModel.user_id == user_id,
            )
            .delete(synchronize_session=False)
        )
        if removed:
            self.db.commit()
            has_upvoted = False
        else:
            try:
                self.db.add(PaperUpvoteModel(paper_id=paper_id, user_id=user_id))
                self.db.commit()
            except IntegrityError:
                # A concurrent request from the same user inserted it first
                self.db.rollback()
            has_upvoted = True
        return self.count_upvotes(paper_id), has_upvoted

    def append_ai_solution(
        self,
        paper_id: str,
        question: str,
        answer: str,
        question_number: Optional[int] = None,
    ) -> Optional[AISolutionModel]:
        """Append a generated answer to a paper's solution log.

        When ``question_number`` matches one of the paper's questions, the
        answer is also attached to that question.

        Returns:
            The stored log entry, or None if the paper does not exist (nothing
            is persisted in that case).
        """
        if self.find_paper(paper_id) is None:
            logger.warning("AI solution not saved, paper %s not found", paper_id)
            return None

        now = datetime.now(pytz.utc)
        entry = AISolutionModel(
            paper_id=paper_id, question=question, answer=answer, generated_at=now
        )
        self.db.add(entry)
        if question_number is not None:
            self.db.query(QuestionModel).filter(
                QuestionModel.paper_id == paper_id,
                QuestionModel.question_number == question_number,
            ).update(
                {
                    QuestionModel.ai_answer: answer,
                    QuestionModel.ai_generated_at: now,
                    QuestionModel.ai_is_generated: True,
                },
                synchronize_session=False,
            )
        try:
            self.db.commit()
        except IntegrityError:
            # The paper was deleted after the lookup above
            self.db.rollback()
            logger.warning("AI solution not saved, paper %s was deleted", paper_id)
            return None
        self.db.refresh(entry)
        return entry

    def list_ai_solutions(self, paper_id: str) -> List[AISolutionModel]:
        """Return a paper's solution log in insertion order.

        Raises:
            PaperNotFoundError: If the paper does not exist.
        """
        self._ensure_exists(paper_id)
        return (
            self.db.query(AISolutionModel)
            .filter(AISolutionModel.paper_id == paper_id)
            .order_by(AISolutionModel.solution_id)
            .all()
        )
