"""Configuration module for the ExamVerse API.

This module provides centralized configuration management, including directory
paths, API server settings, database, AI provider and video search settings.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / "data")))

# Uploaded question papers; served statically under /uploads
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(DATA_DIR / "uploads")))
UPLOAD_URL_PREFIX = "/uploads"

# --- Database Configuration ---

DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/examverse.db")

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("PORT", os.getenv("API_PORT", "5000")))

# CORS allowed origins (comma-separated list). FRONTEND_URL is appended when set.
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:5500,http://127.0.0.1:5500,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",") + [os.getenv("FRONTEND_URL", "")]
    if origin.strip()
]

# --- Logging ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("JWT_EXPIRE_MINUTES", str(60 * 24 * 7))  # 7 days
)

# --- Upload Configuration ---

MAX_PDF_SIZE: int = int(os.getenv("MAX_PDF_SIZE", str(10 * 1024 * 1024)))  # 10MB
PDF_MIME_TYPE = "application/pdf"

# --- LLM Configuration ---

# Gemini is reached through its OpenAI-compatible endpoint
GEMINI_API_KEY: Optional[str] = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_BASE_URL: str = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/"
)
TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))

# --- Video Search Configuration ---

YOUTUBE_API_KEY: Optional[str] = os.getenv("YOUTUBE_API_KEY")
YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3/search"
YOUTUBE_TIMEOUT: float = float(os.getenv("YOUTUBE_TIMEOUT", "10"))
YOUTUBE_DEFAULT_MAX_RESULTS = 3


def build_tutor_llm() -> Optional[Any]:
    """Build the chat model used by the AI tutor.

    Returns:
        A ChatOpenAI instance bound to the Gemini endpoint, or None when
        GEMINI_API_KEY is not set.

    Note:
        Called once at application startup; the instance is shared through
        FastAPI dependencies rather than a module global.
    """
    if not GEMINI_API_KEY:
        return None

    from langchain_openai import ChatOpenAI

    return ChatOpenAI(
        model=GEMINI_MODEL,
        api_key=GEMINI_API_KEY,
        base_url=GEMINI_BASE_URL,
        temperature=TEMPERATURE,
    )
