"""Best-effort extraction of question records from question paper PDFs.

Text is pulled out of the PDF with pdfplumber, then a pluggable
``QuestionExtractor`` turns the raw text into question records. Nothing here
ever raises to the caller: any failure yields an empty list.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple

import pdfplumber

from schemas.paper import QuestionInput

logger = logging.getLogger(__name__)

# "1.", "1)", "Q1.", "Q.1", "Q 1:", "Question 1 -" at the start of a line
QUESTION_START_RE = re.compile(
    r"^\s*(?:(?:Q(?:uestion)?|Ques)\s*\.?\s*(?P<qnum>\d{1,3})\s*[.):\-]?|(?P<num>\d{1,3})\s*[.)])\s+(?P<text>\S.*)$",
    re.IGNORECASE,
)

# "[5 marks]", "(10 Marks)", "[5]", "(5 M)" at the end of a question, or "5 marks" anywhere
MARKS_BRACKET_RE = re.compile(
    r"[\[(]\s*(\d{1,3})\s*(?:marks?|m)?\s*[\])]\s*$", re.IGNORECASE
)
MARKS_INLINE_RE = re.compile(r"\b(\d{1,3})\s*marks?\b", re.IGNORECASE)

MAX_QUESTION_NUMBER = 200


def split_marks(text: str) -> Tuple[str, Optional[int]]:
    """Split a trailing or inline marks annotation off a question.

    Args:
        text: Question text possibly ending with "[5 marks]" or similar.

    Returns:
        Tuple of (text without the annotation, marks or None).
    """
    match = MARKS_BRACKET_RE.search(text)
    if match:
        return text[: match.start()].rstrip(), int(match.group(1))
    match = MARKS_INLINE_RE.search(text)
    if match:
        return text, int(match.group(1))
    return text, None


class QuestionExtractor:
    """Interface for deriving question records from raw paper text."""

    def extract(self, raw_text: str) -> List[QuestionInput]:
        """Return zero or more questions found in raw_text."""
        raise NotImplementedError


class RegexQuestionExtractor(QuestionExtractor):
    """Finds numbered question headings line by line.

    A line opens a new question when it starts with a question number larger
    than the previous one; other lines are appended to the current question.
    Text before the first question (paper header, instructions) is dropped.
    """

    def extract(self, raw_text: str) -> List[QuestionInput]:
        questions: List[QuestionInput] = []
        current_number: Optional[int] = None
        current_lines: List[str] = []

        def flush():
            if current_number is None:
                return
            text = " ".join(line.strip() for line in current_lines if line.strip())
            text = re.sub(r"\s+", " ", text).strip()
            if not text:
                return
            text, marks = split_marks(text)
            questions.append(
                QuestionInput(question_number=current_number, question_text=text, marks=marks)
            )

        for line in (raw_text or "").splitlines():
            match = QUESTION_START_RE.match(line)
            if match:
                number = int(match.group("qnum") or match.group("num"))
                if 0 < number <= MAX_QUESTION_NUMBER and (
                    current_number is None or number > current_number
                ):
                    flush()
                    current_number = number
                    current_lines = [match.group("text")]
                    continue
            if current_number is not None:
                current_lines.append(line)
        flush()
        return questions


def extract_pdf_text(pdf_path: Path) -> str:
    """Extract the text of every page of a PDF, pages separated by blank lines."""
    with pdfplumber.open(str(pdf_path)) as pdf:
        text_parts = []
        for page_num, page in enumerate(pdf.pages, 1):
            text = page.extract_text()
            if text:
                text_parts.append(text)
            logger.debug("Extracted text from PDF page %d/%d", page_num, len(pdf.pages))
    return "\n\n".join(text_parts)


def extract_questions_from_pdf(
    pdf_path: Path, extractor: Optional[QuestionExtractor] = None
) -> List[QuestionInput]:
    """Derive questions from a stored PDF.

    Args:
        pdf_path: Path of the PDF on disk.
        extractor: Strategy applied to the extracted text. Defaults to
            RegexQuestionExtractor.

    Returns:
        List of questions; empty when the PDF has no text, no recognisable
        structure, or extraction fails for any reason.
    """
    extractor = extractor or RegexQuestionExtractor()
    logger.info("Attempting PDF text extraction: %s", pdf_path)
    try:
        raw_text = extract_pdf_text(pdf_path)
        logger.info("Extracted text length: %d", len(raw_text))
        questions = extractor.extract(raw_text)
    except Exception:
        logger.exception("Question extraction failed for %s", pdf_path)
        return []
    logger.info("Extracted %d questions from PDF", len(questions))
    return questions
