"""Video search routes."""

from fastapi import APIRouter, Depends

from api.routes.auth import get_current_user
from core.dependencies import YouTubeClientDep
from core.exceptions import ValidationError
from schemas.user import User
from schemas.youtube import VideoSearchRequest, VideoSearchResponse

router = APIRouter(prefix="/api/youtube", tags=["YouTube"])


@router.post("/search", response_model=VideoSearchResponse, summary="Search study videos")
def search_videos(
    req: VideoSearchRequest,
    youtube_client: YouTubeClientDep,
    current_user: User = Depends(get_current_user),
) -> VideoSearchResponse:
    query = (req.query or "").strip()
    if not query:
        raise ValidationError("Search query is required")
    videos = youtube_client.search(query, max_results=req.max_results)
    return VideoSearchResponse(count=len(videos), videos=videos)
