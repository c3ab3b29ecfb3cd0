"""
Show Routes Module

REST endpoints for refreshing TV show episodes from TMDB.

Endpoints:
    - POST /{show_id}/episodes/refresh: Refresh episodes for one show
    - POST /episodes/refresh: Refresh episodes for every show
"""

import logging
from fastapi import APIRouter, Depends, HTTPException

from api.models.responses import RefreshEpisodesResponse, RefreshAllEpisodesResponse
from api.services.show_service import ShowService
from api.dependencies import get_show_service
from utils.errors import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/episodes/refresh", response_model=RefreshAllEpisodesResponse)
async def refresh_all_episodes(include_archived: bool = False,
                               show_service: ShowService = Depends(get_show_service)):
    """
    Refresh episodes for every tracked show. Individual show failures are reported
    in the results, never as an HTTP error.
    """
    logger.info(f"POST /api/shows/episodes/refresh include_archived={include_archived}")
    try:
        summary = await show_service.refresh_all_episodes(include_archived)
    except Exception as e:
        logger.exception(f"Bulk episode refresh failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to refresh episodes: {str(e)}")
    return RefreshAllEpisodesResponse(**summary.model_dump())


@router.post("/{show_id}/episodes/refresh", response_model=RefreshEpisodesResponse)
async def refresh_episodes(show_id: int, show_service: ShowService = Depends(get_show_service)):
    """
    Refresh episodes for a specific show by re-fetching data from TMDB.

    Args:
        show_id: Database ID of the show to refresh

    Returns:
        RefreshEpisodesResponse: Counts of new and updated episodes

    Raises:
        NotFoundError: Rendered as 404 when the show does not exist
        HTTPException: 500 when the upstream refresh fails
    """
    logger.info(f"POST /api/shows/{show_id}/episodes/refresh")
    try:
        result = await show_service.refresh_episodes(show_id)
    except NotFoundError:
        raise
    except Exception as e:
        logger.exception(f"Episode refresh for show {show_id} failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to refresh episodes: {str(e)}")

    if not result.success:
        raise HTTPException(status_code=500, detail=f"Failed to refresh episodes: {result.error}")
    return RefreshEpisodesResponse(**result.model_dump())
