"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes.
Request-scoped managers are built around the request's DB session; the
process-wide collaborators (AI tutor, video search, file storage, question
extractor) are created once in ``app.py`` and read from ``app.state``.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from core.database import get_db
from utils import paper_manager
from utils import user_manager
from utils.file_storage import PaperFileStorage
from utils.question_extractor import QuestionExtractor
from utils.solution_generator import SolutionGenerator
from utils.youtube_client import YouTubeClient


def get_file_storage(request: Request) -> PaperFileStorage:
    return request.app.state.file_storage


def get_question_extractor(request: Request) -> QuestionExtractor:
    return request.app.state.question_extractor


def get_solution_generator(request: Request) -> SolutionGenerator:
    return request.app.state.solution_generator


def get_youtube_client(request: Request) -> YouTubeClient:
    return request.app.state.youtube_client


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_paper_manager(
    db: Session = Depends(get_db),
    file_storage: PaperFileStorage = Depends(get_file_storage),
) -> paper_manager.PaperManager:
    """Get PaperManager instance with request-scoped DB session.

    Args:
        db: Database session.
        file_storage: Shared upload storage.

    Returns:
        PaperManager instance.
    """
    return paper_manager.PaperManager(db, file_storage=file_storage)


# Type aliases for dependency injection
UserManagerDep = Annotated[user_manager.UserManager, Depends(get_user_manager)]
PaperManagerDep = Annotated[paper_manager.PaperManager, Depends(get_paper_manager)]
FileStorageDep = Annotated[PaperFileStorage, Depends(get_file_storage)]
QuestionExtractorDep = Annotated[QuestionExtractor, Depends(get_question_extractor)]
SolutionGeneratorDep = Annotated[SolutionGenerator, Depends(get_solution_generator)]
YouTubeClientDep = Annotated[YouTubeClient, Depends(get_youtube_client)]
