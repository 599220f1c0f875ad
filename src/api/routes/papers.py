"""Question paper routes.

This module handles HTTP endpoints for listing, viewing, uploading, editing
and deleting question papers, and for downloads, upvotes and saves.
"""

import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from api.routes.auth import get_current_user, require_role
from config import MAX_PDF_SIZE, PDF_MIME_TYPE
from core.dependencies import (
    FileStorageDep,
    PaperManagerDep,
    QuestionExtractorDep,
    UserManagerDep,
)
from core.exceptions import FileTooLargeError, ValidationError
from schemas.common import MessageResponse
from schemas.paper import (
    EXAM_TYPES,
    DownloadResponse,
    PaperListResponse,
    PaperMessageResponse,
    PaperResponse,
    PaperUpdateRequest,
    QuestionInput,
    SaveResponse,
    UpvoteResponse,
)
from schemas.user import User
from utils.converters import paper_to_info
from utils.question_extractor import extract_questions_from_pdf

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/papers", tags=["Papers"])

_questions_adapter = TypeAdapter(List[QuestionInput])


def _parse_manual_questions(raw: Optional[str]) -> List[QuestionInput]:
    """Parse the optional ``questions`` form field; malformed input is ignored."""
    if not raw or not raw.strip():
        return []
    try:
        return _questions_adapter.validate_python(json.loads(raw))
    except (json.JSONDecodeError, PydanticValidationError) as e:
        logger.warning("Ignoring malformed questions field: %s", e)
        return []


@router.get("", response_model=PaperListResponse, summary="List question papers")
def list_papers(
    paper_manager: PaperManagerDep,
    college_name: Optional[str] = Query(default=None, alias="collegeName"),
    course: Optional[str] = None,
    year: Optional[str] = None,
    subject: Optional[str] = None,
    exam_type: Optional[str] = Query(default=None, alias="examType"),
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
) -> PaperListResponse:
    """List papers filtered by the query parameters, newest first."""
    papers = paper_manager.list_papers(
        college_name=college_name,
        course=course,
        year=year,
        subject=subject,
        exam_type=exam_type,
        search=search,
    )
    return PaperListResponse(
        count=len(papers), papers=[paper_to_info(p) for p in papers]
    )


@router.get("/{paper_id}", response_model=PaperResponse, summary="Get a question paper")
def get_paper(
    paper_id: str,
    paper_manager: PaperManagerDep,
    current_user: User = Depends(get_current_user),
) -> PaperResponse:
    """Return one paper. Every call counts as a view.

    Raises:
        PaperNotFoundError: If the paper does not exist.
    """
    paper = paper_manager.record_view(paper_id)
    return PaperResponse(paper=paper_to_info(paper, include_uploader_college=True))


@router.post(
    "",
    response_model=PaperMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a question paper",
)
async def upload_paper(
    paper_manager: PaperManagerDep,
    file_storage: FileStorageDep,
    question_extractor: QuestionExtractorDep,
    title: Optional[str] = Form(default=None),
    subject: Optional[str] = Form(default=None),
    year: Optional[str] = Form(default=None),
    course: Optional[str] = Form(default=None),
    exam_type: Optional[str] = Form(default=None, alias="examType"),
    solution_text: Optional[str] = Form(default=None, alias="solutionText"),
    questions: Optional[str] = Form(default=None),
    pdf: Optional[UploadFile] = File(default=None, description="Question paper PDF"),
    current_user: User = Depends(require_role("faculty")),
) -> PaperMessageResponse:
    """Upload a PDF question paper (faculty only).

    Manually supplied questions win; otherwise questions are extracted from
    the PDF text. Extraction never fails the upload.

    Raises:
        ValidationError: Missing fields, missing file or non-PDF file.
        FileTooLargeError: File larger than MAX_PDF_SIZE.
    """
    fields = {"title": title, "subject": subject, "year": year, "course": course}
    missing = [name for name, value in fields.items() if not (value and value.strip())]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    exam_type = (exam_type or "college").strip() or "college"
    if exam_type not in EXAM_TYPES:
        raise ValidationError(f"Invalid exam type: {exam_type}")

    if pdf is None or not pdf.filename:
        raise ValidationError("Please upload a PDF file")

    content = await pdf.read()
    if pdf.content_type != PDF_MIME_TYPE or not content.startswith(b"%PDF"):
        raise ValidationError("Only PDF files are allowed")
    if len(content) > MAX_PDF_SIZE:
        raise FileTooLargeError(
            f"PDF file size exceeds maximum allowed size of {MAX_PDF_SIZE // (1024 * 1024)}MB"
        )

    stored = file_storage.save(content, pdf.filename)

    manual_questions = _parse_manual_questions(questions)
    if manual_questions:
        logger.info("Using %d manually added questions", len(manual_questions))
        paper_questions = manual_questions
    else:
        paper_questions = extract_questions_from_pdf(stored.path, question_extractor)

    try:
        paper = paper_manager.create_paper(
            owner=current_user,
            title=title.strip(),
            subject=subject.strip(),
            year=year.strip(),
            course=course.strip(),
            exam_type=exam_type,
            pdf_url=stored.url,
            pdf_file_name=pdf.filename,
            solution_text=solution_text,
            questions=paper_questions,
        )
    except Exception:
        # Drop the stored file; no paper points at it
        logger.error("Paper creation failed, removing stored upload %s", stored.filename)
        file_storage.delete(stored.url)
        raise
    return PaperMessageResponse(
        message="Question paper uploaded successfully", paper=paper_to_info(paper)
    )


@router.put("/{paper_id}", response_model=PaperMessageResponse, summary="Update a question paper")
def update_paper(
    paper_id: str,
    req: PaperUpdateRequest,
    paper_manager: PaperManagerDep,
    current_user: User = Depends(require_role("faculty")),
) -> PaperMessageResponse:
    """Update title, subject, year and solution text (uploader only).

    Raises:
        PaperNotFoundError: If the paper does not exist.
        ForbiddenError: If the caller did not upload the paper.
    """
    paper = paper_manager.update_paper(
        paper_id,
        current_user.user_id,
        title=req.title,
        subject=req.subject,
        year=req.year,
        solution_text=req.solution_text,
    )
    return PaperMessageResponse(
        message="Paper updated successfully", paper=paper_to_info(paper)
    )


@router.delete("/{paper_id}", response_model=MessageResponse, summary="Delete a question paper")
def delete_paper(
    paper_id: str,
    paper_manager: PaperManagerDep,
    current_user: User = Depends(require_role("faculty")),
) -> MessageResponse:
    """Delete a paper and its stored PDF (uploader only)."""
    paper_manager.delete_paper(paper_id, current_user.user_id)
    return MessageResponse(message="Paper deleted successfully")


@router.post("/{paper_id}/download", response_model=DownloadResponse, summary="Count a download")
def increment_download(
    paper_id: str,
    paper_manager: PaperManagerDep,
    current_user: User = Depends(get_current_user),
) -> DownloadResponse:
    return DownloadResponse(downloads=paper_manager.increment_downloads(paper_id))


@router.post("/{paper_id}/upvote", response_model=UpvoteResponse, summary="Toggle upvote")
def toggle_upvote(
    paper_id: str,
    paper_manager: PaperManagerDep,
    current_user: User = Depends(get_current_user),
) -> UpvoteResponse:
    upvotes, has_upvoted = paper_manager.toggle_upvote(paper_id, current_user.user_id)
    return UpvoteResponse(upvotes=upvotes, has_upvoted=has_upvoted)


@router.post("/{paper_id}/save", response_model=SaveResponse, summary="Toggle saved paper")
def toggle_save_paper(
    paper_id: str,
    user_manager: UserManagerDep,
    current_user: User = Depends(get_current_user),
) -> SaveResponse:
    """Add or remove the paper from the caller's saved papers."""
    is_saved = user_manager.toggle_saved_paper(current_user.user_id, paper_id)
    return SaveResponse(
        is_saved=is_saved,
        saved_papers=user_manager.list_saved_paper_ids(current_user.user_id),
    )
