"""AI tutor routes.

This module handles HTTP endpoints for AI-generated solutions, the per-paper
solution log and topic summaries.
"""

import logging

from fastapi import APIRouter, Depends

from api.routes.auth import get_current_user
from core.dependencies import PaperManagerDep, SolutionGeneratorDep
from core.exceptions import ValidationError
from schemas.ai import (
    GenerateSolutionRequest,
    GenerateSolutionResponse,
    SolutionsResponse,
    SummarizeRequest,
    SummarizeResponse,
)
from schemas.user import User
from utils.converters import solution_to_entry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["AI"])


@router.post(
    "/generate-solution",
    response_model=GenerateSolutionResponse,
    summary="Generate an AI solution",
)
async def generate_solution(
    req: GenerateSolutionRequest,
    solution_generator: SolutionGeneratorDep,
    paper_manager: PaperManagerDep,
    current_user: User = Depends(get_current_user),
) -> GenerateSolutionResponse:
    """Generate a solution and, when paperId resolves, log it on the paper.

    An unknown paperId does not fail the request; the answer is returned
    without being stored.

    Raises:
        ValidationError: If question is missing.
        UpstreamError: If the AI provider fails.
    """
    question = (req.question or "").strip()
    if not question:
        raise ValidationError("Question is required")

    answer = await solution_generator.generate_solution(question, req.subject)

    if req.paper_id:
        paper_manager.append_ai_solution(
            req.paper_id, question, answer, question_number=req.question_number
        )

    return GenerateSolutionResponse(question=question, answer=answer)


@router.get(
    "/solutions/{paper_id}",
    response_model=SolutionsResponse,
    summary="Get saved AI solutions of a paper",
)
def get_saved_solutions(
    paper_id: str,
    paper_manager: PaperManagerDep,
    current_user: User = Depends(get_current_user),
) -> SolutionsResponse:
    solutions = paper_manager.list_ai_solutions(paper_id)
    return SolutionsResponse(solutions=[solution_to_entry(s) for s in solutions])


@router.post("/summarize", response_model=SummarizeResponse, summary="Summarize a topic")
async def summarize_topic(
    req: SummarizeRequest,
    solution_generator: SolutionGeneratorDep,
    current_user: User = Depends(get_current_user),
) -> SummarizeResponse:
    """Summarize a topic for revision. Nothing is stored."""
    topic = (req.topic or "").strip()
    if not topic:
        raise ValidationError("Topic is required")
    summary = await solution_generator.summarize_topic(topic, req.subject)
    return SummarizeResponse(topic=topic, summary=summary)
