"""Main FastAPI application module.

This module initializes the FastAPI application, builds the process-wide
collaborators, registers error handlers and all route handlers.
"""

import logging
from datetime import datetime

import pytz
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging_config import setup_logging
from config import (
    API_HOST,
    API_PORT,
    CORS_ALLOWED_ORIGINS,
    UPLOAD_DIR,
    UPLOAD_URL_PREFIX,
    YOUTUBE_API_KEY,
    build_tutor_llm,
)
from core.exceptions import ExamVerseError
from api.routes import ai, auth, papers, youtube
from utils.file_storage import PaperFileStorage
from utils.question_extractor import RegexQuestionExtractor
from utils.solution_generator import SolutionGenerator
from utils.youtube_client import YouTubeClient

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)

API_NAME = "ExamVerse API"
API_VERSION = "1.0.0"

# Initialize FastAPI application
app = FastAPI(
    title=API_NAME,
    description="Backend API for sharing and studying exam question papers.",
    version=API_VERSION,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Collaborators built once per process and handed to routes via core.dependencies
app.state.file_storage = PaperFileStorage(UPLOAD_DIR)
app.state.question_extractor = RegexQuestionExtractor()
app.state.solution_generator = SolutionGenerator(build_tutor_llm())
app.state.youtube_client = YouTubeClient(YOUTUBE_API_KEY)

if app.state.solution_generator.llm is None:
    logger.warning("GEMINI_API_KEY not set; AI endpoints will fail")
if not YOUTUBE_API_KEY:
    logger.warning("YOUTUBE_API_KEY not set; video search will fail")

# Stored PDFs are served as static files
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")


# --- Error handlers: every failure becomes {"success": false, "message": ...} ---


def _error_response(status_code: int, message: str, error: str = None) -> JSONResponse:
    body = {"success": False, "message": message}
    if error:
        body["error"] = error
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(ExamVerseError)
async def examverse_error_handler(request: Request, exc: ExamVerseError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.error)
    return _error_response(exc.status_code, exc.message, exc.error)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = str(exc.detail)
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = "Route not found"
    return _error_response(exc.status_code, message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())[1:])
        details.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    return _error_response(400, "; ".join(details) or "Invalid request")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(500, "Server Error", str(exc))


# Register route handlers
app.include_router(auth.router)
app.include_router(papers.router)
app.include_router(ai.router)
app.include_router(youtube.router)


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """API root, returns API information and documentation links."""
    return {
        "name": API_NAME,
        "version": API_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint."""
    return {
        "success": True,
        "message": "ExamVerse API is running",
        "timestamp": datetime.now(pytz.utc).isoformat(),
    }


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    logger.info("Starting %s on http://%s:%s (docs at /docs)", API_NAME, API_HOST, API_PORT)
    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
