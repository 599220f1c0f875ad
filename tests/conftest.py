import os
import tempfile

# Point the app at throwaway storage before anything imports config
_TMP_DIR = tempfile.mkdtemp(prefix="examverse-tests-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DATA_DIR"] = _TMP_DIR
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["GEMINI_API_KEY"] = ""
os.environ["YOUTUBE_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from app import app
from core.database import SessionLocal, engine
from core.dependencies import get_solution_generator, get_youtube_client
from models.base import Base
from utils.solution_generator import SolutionGenerator
from utils.youtube_client import YouTubeClient

FAKE_ANSWER = "Entropy measures the disorder of a system. Final answer: S = k ln W."

PDF_BYTES = b"%PDF-1.4\n% not a real document\n"


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload or {}
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            import requests

            raise requests.HTTPError(f"{self.status_code} Client Error")

    def json(self):
        return self.payload


class FakeSession:
    """Stands in for requests.Session and records the calls made."""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse({"items": []})
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def solution_generator():
    return SolutionGenerator(FakeListChatModel(responses=[FAKE_ANSWER]))


@pytest.fixture
def youtube_session():
    return FakeSession()


@pytest.fixture
def client(solution_generator, youtube_session):
    app.dependency_overrides[get_solution_generator] = lambda: solution_generator
    app.dependency_overrides[get_youtube_client] = lambda: YouTubeClient(
        "test-key", session=youtube_session
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register_user(client, email, role="student", college="MIT", name="Test User"):
    payload = {
        "name": name,
        "email": email,
        "password": "secret123",
        "role": role,
        "collegeName": college,
    }
    if role == "student":
        payload.update({"course": "BSc", "year": "2"})
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    body = response.json()
    return {"Authorization": f"Bearer {body['token']}"}, body["user"]


@pytest.fixture
def faculty(client):
    return register_user(client, "prof@college.edu", role="faculty", name="Prof X")


@pytest.fixture
def other_faculty(client):
    return register_user(client, "other@college.edu", role="faculty", college="Stanford")


@pytest.fixture
def student(client):
    return register_user(client, "student@college.edu")


@pytest.fixture
def other_student(client):
    return register_user(client, "second@college.edu")


def upload_paper(client, headers, pdf=PDF_BYTES, content_type="application/pdf", **fields):
    data = {"title": "Midterm 2023", "subject": "Physics", "year": "2023", "course": "BSc"}
    data.update(fields)
    data = {k: v for k, v in data.items() if v is not None}
    files = {"pdf": ("midterm.pdf", pdf, content_type)} if pdf is not None else None
    return client.post("/api/papers", data=data, files=files, headers=headers)


@pytest.fixture
def paper(client, faculty):
    headers, _ = faculty
    response = upload_paper(
        client,
        headers,
        questions='[{"questionNumber": 1, "questionText": "What is entropy?", "marks": 5}]',
    )
    assert response.status_code == 201, response.text
    return response.json()["paper"]
