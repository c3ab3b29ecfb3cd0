"""
Result records returned by the import and refresh entry points.

All of them are plain pydantic models so callers can serialize them directly
with model_dump().
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field
from models.media import MediaKind

OutcomeStatus = Literal["ok", "skipped", "failed"]


class ItemOutcome(BaseModel):
    """
    Outcome of processing one batch item: ok, skipped or failed.

    Attributes:
        status (str): "ok", "skipped" or "failed".
        ref (str): The raw reference the item was identified by.
        media_kind (Optional[MediaKind]): Resolved kind, for ok outcomes.
        tmdb_id (Optional[int]): Resolved TMDB ID, for ok outcomes.
        created (bool): True when a new local record was created.
        title (Optional[str]): Title of the resolved show or movie.
        poster_url (Optional[str]): Full TMDB poster URL, when the record has a poster.
        reason (Optional[str]): Why the item was skipped.
        error (Optional[str]): Error message for failed items.
    """
    status: OutcomeStatus
    ref: str
    media_kind: Optional[MediaKind] = None
    tmdb_id: Optional[int] = None
    created: bool = False
    title: Optional[str] = None
    poster_url: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, ref: str, media_kind: MediaKind, tmdb_id: int, created: bool,
           title: Optional[str] = None, poster_url: Optional[str] = None) -> "ItemOutcome":
        return cls(status="ok", ref=ref, media_kind=media_kind, tmdb_id=tmdb_id, created=created,
                   title=title, poster_url=poster_url)

    @classmethod
    def skipped(cls, ref: str, reason: str) -> "ItemOutcome":
        return cls(status="skipped", ref=ref, reason=reason)

    @classmethod
    def failed(cls, ref: str, error: str) -> "ItemOutcome":
        return cls(status="failed", ref=ref, error=error)


class ImportSummary(BaseModel):
    """
    Aggregate counters for a bulk import run.

    imported/tv_shows/movies count newly created records only; entries that
    already existed locally are counted in `existing`.
    """
    total: int = 0
    imported: int = 0
    tv_shows: int = 0
    movies: int = 0
    existing: int = 0
    skipped: int = 0
    errors: int = 0
    not_found: List[str] = Field(default_factory=list)
    results: List[ItemOutcome] = Field(default_factory=list)

    def record(self, outcome: ItemOutcome) -> None:
        self.results.append(outcome)
        if outcome.status == "skipped":
            self.skipped += 1
        elif outcome.status == "failed":
            self.errors += 1
        elif outcome.created:
            self.imported += 1
            if outcome.media_kind == MediaKind.TV:
                self.tv_shows += 1
            else:
                self.movies += 1
        else:
            self.existing += 1


class ReconcileResult(BaseModel):
    created: int = 0
    updated: int = 0


class RefreshResult(BaseModel):
    """Outcome of refreshing one show's episodes."""
    tv_show_id: int
    tv_show_title: str
    success: bool
    new_episodes: int = 0
    updated_episodes: int = 0
    error: Optional[str] = None


class RefreshAllResult(BaseModel):
    total: int = 0
    successful: int = 0
    failed: int = 0
    results: List[RefreshResult] = Field(default_factory=list)


class VideoImportResult(BaseModel):
    imported: int = 0
    updated: int = 0
