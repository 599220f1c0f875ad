"""Question paper schema definitions."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from schemas.common import CamelModel

ExamType = Literal["college", "competitive"]
EXAM_TYPES = ("college", "competitive")


class QuestionInput(CamelModel):
    """A question supplied by the uploader or derived from the PDF text."""

    question_number: Optional[int] = None
    question_text: str
    marks: Optional[int] = None


class QuestionAISolution(CamelModel):
    answer: Optional[str] = None
    generated_at: Optional[datetime] = None
    is_generated: bool = False


class QuestionInfo(CamelModel):
    id: int
    question_number: Optional[int] = None
    question_text: str
    marks: Optional[int] = None
    ai_solution: QuestionAISolution = Field(default_factory=QuestionAISolution)


class SolutionLogEntry(CamelModel):
    id: int
    question: str
    answer: str
    generated_at: datetime


class UploaderInfo(CamelModel):
    id: str
    name: str
    email: str
    college_name: Optional[str] = None


class PaperInfo(CamelModel):
    id: str
    title: str
    subject: str
    year: str
    exam_type: ExamType
    college_name: str
    course: str
    uploaded_by: UploaderInfo
    pdf_url: str = Field(alias="pdfURL")
    pdf_file_name: str
    solution_text: str = ""
    has_faculty_solution: bool = False
    questions: List[QuestionInfo] = Field(default_factory=list)
    ai_generated_solutions: List[SolutionLogEntry] = Field(default_factory=list)
    views: int = 0
    downloads: int = 0
    upvotes: int = 0
    upvoted_by: List[str] = Field(default_factory=list)
    created_at: datetime


class PaperUpdateRequest(CamelModel):
    title: Optional[str] = None
    subject: Optional[str] = None
    year: Optional[str] = None
    solution_text: Optional[str] = None

    @field_validator("title", "subject", "year")
    @classmethod
    def strip_required_text(cls, value: Optional[str]) -> Optional[str]:
        # Omitted keeps the stored value; supplied values must not be blank
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class PaperListResponse(CamelModel):
    success: bool = True
    count: int
    papers: List[PaperInfo]


class PaperResponse(CamelModel):
    success: bool = True
    paper: PaperInfo


class PaperMessageResponse(CamelModel):
    success: bool = True
    message: str
    paper: PaperInfo


class DownloadResponse(CamelModel):
    success: bool = True
    downloads: int


class UpvoteResponse(CamelModel):
    success: bool = True
    upvotes: int
    has_upvoted: bool


class SaveResponse(CamelModel):
    success: bool = True
    is_saved: bool
    saved_papers: List[str]
