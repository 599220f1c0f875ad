"""Question paper database models."""

from datetime import datetime

import pytz
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .base import Base


def _utcnow():
    return datetime.now(pytz.utc)


class QuestionPaperModel(Base):
    __tablename__ = "question_papers"
    __table_args__ = (
        Index("ix_question_papers_college_course_year", "college_name", "course", "year"),
    )

    paper_id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    subject = Column(String, nullable=False, index=True)
    year = Column(String, nullable=False)
    exam_type = Column(String, nullable=False, default="college", index=True)
    college_name = Column(String, nullable=False)
    course = Column(String, nullable=False)
    uploaded_by = Column(String, ForeignKey("users.user_id"), nullable=False, index=True)
    pdf_url = Column(String, nullable=False)
    pdf_file_name = Column(String, nullable=False)
    solution_text = Column(Text, nullable=False, default="")
    has_faculty_solution = Column(Boolean, nullable=False, default=False)
    # Only ever changed through atomic "views = views + 1" updates
    views = Column(Integer, nullable=False, default=0)
    downloads = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)

    uploader = relationship("UserModel")
    questions = relationship(
        "QuestionModel",
        cascade="all, delete-orphan",
        order_by="QuestionModel.position",
    )
    ai_solutions = relationship(
        "AISolutionModel",
        cascade="all, delete-orphan",
        order_by="AISolutionModel.solution_id",
    )
    upvoters = relationship(
        "PaperUpvoteModel",
        cascade="all, delete-orphan",
        order_by="PaperUpvoteModel.upvoted_at",
    )

    @property
    def upvoted_by(self):
        return [u.user_id for u in self.upvoters]

    @property
    def upvotes(self) -> int:
        # Derived from the upvoter set; never stored
        return len(self.upvoters)


class QuestionModel(Base):
    __tablename__ = "questions"

    question_id = Column(Integer, primary_key=True, index=True)
    paper_id = Column(
        String,
        ForeignKey("question_papers.paper_id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    position = Column(Integer, nullable=False)
    question_number = Column(Integer, nullable=True)
    question_text = Column(Text, nullable=False, default="")
    marks = Column(Integer, nullable=True)

    ai_answer = Column(Text, nullable=True)
    ai_generated_at = Column(DateTime(timezone=True), nullable=True)
    ai_is_generated = Column(Boolean, nullable=False, default=False)


class AISolutionModel(Base):
    """Append-only log of ad-hoc AI answers attached to a paper."""

    __tablename__ = "ai_solutions"

    solution_id = Column(Integer, primary_key=True, index=True)
    paper_id = Column(
        String,
        ForeignKey("question_papers.paper_id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    generated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class PaperUpvoteModel(Base):
    __tablename__ = "paper_upvotes"

    paper_id = Column(
        String,
        ForeignKey("question_papers.paper_id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id = Column(
        String, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True
    )
    upvoted_at = Column(DateTime(timezone=True), default=_utcnow)
