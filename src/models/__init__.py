from .user import UserModel, SavedPaperModel
from .question_paper import (
    AISolutionModel,
    PaperUpvoteModel,
    QuestionModel,
    QuestionPaperModel,
)

__all__ = [
    "UserModel",
    "SavedPaperModel",
    "QuestionPaperModel",
    "QuestionModel",
    "AISolutionModel",
    "PaperUpvoteModel",
]
