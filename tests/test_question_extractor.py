"""Tests for question extraction from paper text."""

from utils import question_extractor
from utils.question_extractor import (
    RegexQuestionExtractor,
    extract_questions_from_pdf,
    split_marks,
)

SAMPLE_PAPER = """Massachusetts Institute of Technology
Mid Semester Examination 2023
Time: 3 hours    Max Marks: 50

1. Define entropy and state its SI unit. [5 marks]
2. Derive the expression for work done in an
isothermal process. (10)
Q3) Explain the Carnot cycle with a neat diagram. 15 marks
Question 4: What is a reversible process?
"""


def test_extracts_numbered_questions_and_drops_header():
    questions = RegexQuestionExtractor().extract(SAMPLE_PAPER)

    assert [q.question_number for q in questions] == [1, 2, 3, 4]
    assert questions[0].question_text == "Define entropy and state its SI unit."
    assert questions[0].marks == 5
    assert questions[1].question_text == (
        "Derive the expression for work done in an isothermal process."
    )
    assert questions[1].marks == 10
    assert questions[2].marks == 15
    assert questions[3].question_text == "What is a reversible process?"
    assert questions[3].marks is None


def test_non_increasing_numbers_continue_current_question():
    text = "1. List the following:\n1) heat\n2. Explain work."

    questions = RegexQuestionExtractor().extract(text)

    assert [q.question_number for q in questions] == [1, 2]
    assert questions[0].question_text == "List the following: 1) heat"


def test_empty_or_unstructured_text_yields_nothing():
    extractor = RegexQuestionExtractor()

    assert extractor.extract("") == []
    assert extractor.extract("Just a cover page with no questions") == []


def test_split_marks():
    assert split_marks("Explain refraction [5 marks]") == ("Explain refraction", 5)
    assert split_marks("Explain refraction (5)") == ("Explain refraction", 5)
    assert split_marks("Explain refraction") == ("Explain refraction", None)


def test_pdf_failure_yields_empty_list(tmp_path):
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"%PDF-1.4\n" + b"\0" * 1024)

    assert extract_questions_from_pdf(broken) == []


def test_extractor_error_yields_empty_list(tmp_path, monkeypatch):
    class ExplodingExtractor(RegexQuestionExtractor):
        def extract(self, raw_text):
            raise ValueError("boom")

    monkeypatch.setattr(question_extractor, "extract_pdf_text", lambda path: "1. Q")

    assert extract_questions_from_pdf(tmp_path / "x.pdf", ExplodingExtractor()) == []


def test_pdf_text_is_fed_to_extractor(tmp_path, monkeypatch):
    monkeypatch.setattr(question_extractor, "extract_pdf_text", lambda path: SAMPLE_PAPER)

    questions = extract_questions_from_pdf(tmp_path / "x.pdf")

    assert len(questions) == 4
