"""
Video Routes Module

Endpoints:
    - POST /import/watch-later: Import the YouTube watch-later playlist
"""

import logging
from fastapi import APIRouter, Depends, HTTPException

from api.models.responses import VideoImportResponse
from api.services.video_service import VideoService
from api.dependencies import get_video_service
from utils.errors import AuthenticationRequiredError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/import/watch-later", response_model=VideoImportResponse)
async def import_watch_later(video_service: VideoService = Depends(get_video_service)):
    """
    Import the authenticated user's watch-later playlist.

    Raises:
        AuthenticationRequiredError: Rendered as 401 with requires_auth=true
        NotFoundError: Rendered as 404 when the playlist cannot be found
        HTTPException: 500 for any other failure
    """
    logger.info("POST /api/videos/import/watch-later")
    try:
        result = await video_service.import_watch_later()
    except (AuthenticationRequiredError, NotFoundError):
        raise
    except Exception as e:
        logger.exception(f"Watch-later import failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to import videos: {str(e)}")
    return VideoImportResponse(imported=result.imported, updated=result.updated)
