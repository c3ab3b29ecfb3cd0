"""
Import Routes Module

REST endpoints for bulk imports from uploaded files.

Endpoints:
    - POST /tmdb: Import a feed file of TMDB IDs
    - POST /imdb: Import a feed file of IMDb IDs
    - POST /letterboxd: Import a Letterboxd CSV export
"""

import logging
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from api.models.responses import ImportResponse
from api.services.import_service import ImportService
from api.dependencies import get_import_service
from models.media import IdSpace

logger = logging.getLogger(__name__)

router = APIRouter()

CSV_CONTENT_TYPES = {"text/csv", "application/csv", "application/vnd.ms-excel"}


async def _import_feed(file: UploadFile, id_space: IdSpace, import_service: ImportService) -> ImportResponse:
    content = await file.read()
    try:
        summary = await import_service.import_feed(content, id_space)
    except ValueError as e:
        logger.error(f"Invalid feed upload {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Feed import from {file.filename} failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to import feed: {str(e)}")
    return ImportResponse.from_summary(summary)


@router.post("/tmdb", response_model=ImportResponse)
async def import_tmdb(file: UploadFile = File(...), import_service: ImportService = Depends(get_import_service)):
    """Import an uploaded feed file whose entries are TMDB IDs."""
    logger.info(f"POST /api/import/tmdb with file {file.filename}")
    return await _import_feed(file, IdSpace.TMDB, import_service)


@router.post("/imdb", response_model=ImportResponse)
async def import_imdb(file: UploadFile = File(...), import_service: ImportService = Depends(get_import_service)):
    """Import an uploaded feed file whose entries are IMDb IDs."""
    logger.info(f"POST /api/import/imdb with file {file.filename}")
    return await _import_feed(file, IdSpace.IMDB, import_service)


@router.post("/letterboxd", response_model=ImportResponse)
async def import_letterboxd(file: UploadFile = File(...), import_service: ImportService = Depends(get_import_service)):
    """
    Import an uploaded Letterboxd CSV export.

    Raises:
        HTTPException: 400 for non-CSV uploads or malformed files, 500 otherwise
    """
    logger.info(f"POST /api/import/letterboxd with file {file.filename}")
    filename = (file.filename or "").lower()
    if not filename.endswith(".csv") and file.content_type not in CSV_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Invalid file type. Please upload a CSV file.")

    content = await file.read()
    try:
        summary = await import_service.import_letterboxd(content)
    except ValueError as e:
        logger.error(f"Invalid Letterboxd upload {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Letterboxd import failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to import from Letterboxd CSV: {str(e)}")
    return ImportResponse.from_summary(summary)
