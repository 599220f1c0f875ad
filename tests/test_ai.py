"""Tests for AI solution generation, the solution log and topic summaries."""

from datetime import datetime, timezone

import pytest
from pydantic import TypeAdapter

from conftest import FAKE_ANSWER
from core.dependencies import get_solution_generator
from core.exceptions import UpstreamError
from app import app
from utils.solution_generator import SolutionGenerator

_datetime = TypeAdapter(datetime)


class FailingLLM:
    async def ainvoke(self, prompt):
        raise RuntimeError("quota exceeded")


class EmptyLLM:
    class _Message:
        content = "   "

    async def ainvoke(self, prompt):
        return self._Message()


class TestGenerateSolution:
    def test_generate_without_paper_returns_answer(self, client, student):
        headers, _ = student

        response = client.post(
            "/api/ai/generate-solution", json={"question": "What is entropy?"}, headers=headers
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "question": "What is entropy?",
            "answer": FAKE_ANSWER,
            "isAIGenerated": True,
        }

    def test_generate_with_paper_appends_one_log_entry(self, client, student, paper):
        headers, _ = student
        before = datetime.now(timezone.utc).replace(microsecond=0)

        client.post(
            "/api/ai/generate-solution",
            json={"question": "What is entropy?", "paperId": paper["id"]},
            headers=headers,
        )

        solutions = client.get(f"/api/ai/solutions/{paper['id']}", headers=headers).json()
        assert solutions["success"] is True
        assert len(solutions["solutions"]) == 1
        entry = solutions["solutions"][0]
        assert entry["question"] == "What is entropy?"
        assert entry["answer"] == FAKE_ANSWER
        assert _datetime.validate_python(entry["generatedAt"]) >= before

    def test_log_keeps_insertion_order(self, client, student, paper):
        headers, _ = student

        for question in ("First?", "Second?"):
            client.post(
                "/api/ai/generate-solution",
                json={"question": question, "paperId": paper["id"]},
                headers=headers,
            )

        solutions = client.get(f"/api/ai/solutions/{paper['id']}", headers=headers).json()
        assert [s["question"] for s in solutions["solutions"]] == ["First?", "Second?"]

    def test_unknown_paper_is_not_persisted(self, client, student):
        headers, _ = student

        response = client.post(
            "/api/ai/generate-solution",
            json={"question": "What is entropy?", "paperId": "missing-paper"},
            headers=headers,
        )

        assert response.status_code == 200
        assert client.get("/api/ai/solutions/missing-paper", headers=headers).status_code == 404

    def test_question_number_attaches_answer_to_question(self, client, student, paper):
        headers, _ = student

        client.post(
            "/api/ai/generate-solution",
            json={"question": "What is entropy?", "paperId": paper["id"], "questionNumber": 1},
            headers=headers,
        )

        current = client.get(f"/api/papers/{paper['id']}", headers=headers).json()["paper"]
        ai_solution = current["questions"][0]["aiSolution"]
        assert ai_solution["isGenerated"] is True
        assert ai_solution["answer"] == FAKE_ANSWER
        assert len(current["aiGeneratedSolutions"]) == 1

    def test_missing_question_is_rejected(self, client, student):
        headers, _ = student

        response = client.post("/api/ai/generate-solution", json={}, headers=headers)

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Question is required"}

    def test_provider_failure_returns_error_envelope(self, client, student, paper):
        headers, _ = student
        app.dependency_overrides[get_solution_generator] = lambda: SolutionGenerator(FailingLLM())

        response = client.post(
            "/api/ai/generate-solution",
            json={"question": "What is entropy?", "paperId": paper["id"]},
            headers=headers,
        )

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Failed to generate AI solution. Please try again."
        assert "quota exceeded" in body["error"]
        solutions = client.get(f"/api/ai/solutions/{paper['id']}", headers=headers).json()
        assert solutions["solutions"] == []

    def test_requires_auth(self, client):
        response = client.post("/api/ai/generate-solution", json={"question": "x"})

        assert response.status_code == 401


class TestSummarize:
    def test_summarize_returns_summary(self, client, student):
        headers, _ = student

        response = client.post(
            "/api/ai/summarize", json={"topic": "Thermodynamics", "subject": "Physics"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "topic": "Thermodynamics",
            "summary": FAKE_ANSWER,
        }

    def test_missing_topic_is_rejected(self, client, student):
        headers, _ = student

        response = client.post("/api/ai/summarize", json={"topic": "  "}, headers=headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Topic is required"

    def test_provider_failure(self, client, student):
        headers, _ = student
        app.dependency_overrides[get_solution_generator] = lambda: SolutionGenerator(FailingLLM())

        response = client.post("/api/ai/summarize", json={"topic": "Optics"}, headers=headers)

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to summarize topic"


class TestSolutionGenerator:
    @pytest.mark.anyio
    async def test_missing_provider_raises(self):
        generator = SolutionGenerator(None)

        with pytest.raises(UpstreamError):
            await generator.generate_solution("What is entropy?")

    @pytest.mark.anyio
    async def test_empty_response_raises(self):
        generator = SolutionGenerator(EmptyLLM())

        with pytest.raises(UpstreamError) as exc_info:
            await generator.summarize_topic("Optics")
        assert exc_info.value.status_code == 500

    def test_prompts_include_subject_and_question(self):
        generator = SolutionGenerator(None)

        prompt = generator.build_solution_prompt("What is entropy?", "Physics")
        assert "expert Physics tutor" in prompt
        assert "Question: What is entropy?" in prompt
        assert "expert academic tutor" in generator.build_solution_prompt("x")
        assert "following Physics topic" in generator.build_summary_prompt("Optics", "Physics")
        assert "following topic" in generator.build_summary_prompt("Optics")
