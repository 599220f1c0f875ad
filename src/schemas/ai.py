"""AI tutor request/response schemas."""

from typing import List, Optional

from pydantic import Field

from schemas.common import CamelModel
from schemas.paper import SolutionLogEntry


class GenerateSolutionRequest(CamelModel):
    question: Optional[str] = None
    paper_id: Optional[str] = None
    subject: Optional[str] = None
    # Attach the answer to this fixed question of the paper as well
    question_number: Optional[int] = None


class GenerateSolutionResponse(CamelModel):
    success: bool = True
    question: str
    answer: str
    is_ai_generated: bool = Field(default=True, alias="isAIGenerated")


class SolutionsResponse(CamelModel):
    success: bool = True
    solutions: List[SolutionLogEntry]


class SummarizeRequest(CamelModel):
    topic: Optional[str] = None
    subject: Optional[str] = None


class SummarizeResponse(CamelModel):
    success: bool = True
    topic: str
    summary: str
