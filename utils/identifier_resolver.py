"""
Identifier resolution: map a raw external reference to a TMDB (id, kind) pair.
"""
import re
import logging
from typing import Optional, Union
from models.media import CanonicalMediaRef, IdSpace, MediaKind, Skipped
from services.tmdb_service import TMDBService
from utils.errors import TMDBError

logger = logging.getLogger(__name__)

TMDB_PREFIX = "tmdb:"
IMDB_ID_PATTERN = re.compile(r"^tt\d+$")
NUMERIC_PATTERN = re.compile(r"^\d+$")

# Accepted aliases for the expected_kind argument
_KIND_ALIASES = {
    "tmdb": IdSpace.TMDB,
    "canonical": IdSpace.TMDB,
    "imdb": IdSpace.IMDB,
    "thirdparty": IdSpace.IMDB,
}

Resolution = Union[CanonicalMediaRef, Skipped]


def classify(raw: str, expected_kind: Optional[Union[IdSpace, str]] = None) -> Optional[IdSpace]:
    """
    Decide which identifier space a raw reference belongs to.

    A known expected_kind is trusted as-is. Without one, or when the alias is not
    recognized, a "tmdb:" prefix or a purely numeric string means TMDB, a "tt" +
    digits string means IMDb, and anything else returns None.
    """
    if expected_kind is not None:
        if isinstance(expected_kind, IdSpace):
            return expected_kind
        space = _KIND_ALIASES.get(str(expected_kind).lower())
        if space is not None:
            return space
        logger.warning(f"Unknown identifier kind {expected_kind!r}, detecting from {raw!r}")

    if raw.startswith(TMDB_PREFIX):
        return IdSpace.TMDB
    if IMDB_ID_PATTERN.match(raw):
        return IdSpace.IMDB
    if NUMERIC_PATTERN.match(raw):
        return IdSpace.TMDB
    return None


def _parse_tmdb_id(raw: str) -> Optional[int]:
    value = raw[len(TMDB_PREFIX):] if raw.startswith(TMDB_PREFIX) else raw
    value = value.strip()
    if not NUMERIC_PATTERN.match(value):
        return None
    tmdb_id = int(value)
    return tmdb_id if tmdb_id > 0 else None


def _probe_kind(tmdb: TMDBService, tmdb_id: int) -> Optional[MediaKind]:
    """Probe TV first, then movie. 404 falls through; any other error propagates."""
    try:
        tmdb.get_show(tmdb_id)
        return MediaKind.TV
    except TMDBError as e:
        if not e.is_not_found:
            raise
        logger.debug(f"TMDB ID {tmdb_id} is not a TV show, trying movie")

    try:
        tmdb.get_movie(tmdb_id)
        return MediaKind.MOVIE
    except TMDBError as e:
        if not e.is_not_found:
            raise
    return None


def _resolve_imdb(tmdb: TMDBService, imdb_id: str) -> Resolution:
    try:
        found = tmdb.find_by_imdb_id(imdb_id)
    except TMDBError as e:
        if e.is_not_found:
            logger.warning(f"Could not find TMDB ID for IMDb ID: {imdb_id}")
            return Skipped(reason="not_found", raw=imdb_id)
        raise

    # Movie results win when an IMDb ID matches both a movie and a show
    for key, kind in (("movie_results", MediaKind.MOVIE), ("tv_results", MediaKind.TV)):
        results = found.get(key) or []
        if results and results[0].get("id"):
            ref = CanonicalMediaRef(canonical_id=int(results[0]["id"]), media_kind=kind)
            logger.debug(f"Resolved IMDb ID {imdb_id} to {kind.value} {ref.canonical_id}")
            return ref

    logger.warning(f"Could not find TMDB ID for IMDb ID: {imdb_id}")
    return Skipped(reason="not_found", raw=imdb_id)


def resolve(
    tmdb: TMDBService,
    raw: str,
    expected_kind: Optional[Union[IdSpace, str]] = None,
) -> Resolution:
    """
    Resolve a raw external reference to a CanonicalMediaRef.

    Args:
        tmdb (TMDBService): Metadata client used for lookups and probes.
        raw (str): Raw reference such as "tmdb:550", "550" or "tt0137523".
        expected_kind: Optional identifier space ("tmdb"/"canonical" or
            "imdb"/"thirdparty"); when given no format sniffing is done.

    Returns:
        CanonicalMediaRef on success, Skipped when the reference cannot be mapped.

    Raises:
        TMDBError: For upstream failures other than "not found".
    """
    raw = (raw or "").strip()
    space = classify(raw, expected_kind)

    if space is None:
        logger.warning(f"Skipping entry with unsupported ID format: {raw}")
        return Skipped(reason="unsupported_format", raw=raw)

    if space == IdSpace.IMDB:
        return _resolve_imdb(tmdb, raw)

    tmdb_id = _parse_tmdb_id(raw)
    if tmdb_id is None:
        logger.warning(f"Invalid TMDB ID: {raw}")
        return Skipped(reason="invalid_id", raw=raw)

    kind = _probe_kind(tmdb, tmdb_id)
    if kind is None:
        logger.warning(f"Could not determine media type for TMDB ID: {tmdb_id}")
        return Skipped(reason="not_found", raw=raw)

    return CanonicalMediaRef(canonical_id=tmdb_id, media_kind=kind)
