from pydantic import BaseModel, Field
from typing import List, Optional
from models.results import ImportSummary, ItemOutcome, RefreshResult


class ImportResponse(BaseModel):
    """
    Response model for a bulk import.

    Fields:
        message (str): Human-readable status.
        total (int): Entries processed.
        imported (int): New shows and movies created.
        tv_shows (int): New shows created.
        movies (int): New movies created.
        existing (int): Entries that were already tracked.
        skipped (int): Entries that could not be resolved.
        errors (int): Entries that failed.
        not_found (List[str]): Titles with no TMDB match (Letterboxd imports).
        results (List[ItemOutcome]): Per-entry outcomes, with title and poster URL for resolved items.
    """
    message: str = "Import completed"
    total: int
    imported: int
    tv_shows: int
    movies: int
    existing: int = 0
    skipped: int
    errors: int
    not_found: List[str] = Field(default_factory=list)
    results: List[ItemOutcome] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: ImportSummary) -> "ImportResponse":
        return cls(**summary.model_dump())


class RefreshEpisodesResponse(BaseModel):
    """
    Response model for a single show's episode refresh.

    Fields:
        success (bool): Whether the refresh succeeded.
        tv_show_id (int): Database ID of the show.
        tv_show_title (str): Title of the show.
        new_episodes (int): Episodes created.
        updated_episodes (int): Episodes updated in place.
        error (Optional[str]): Failure message.
    """
    success: bool
    tv_show_id: int
    tv_show_title: str
    new_episodes: int = 0
    updated_episodes: int = 0
    error: Optional[str] = None


class RefreshAllEpisodesResponse(BaseModel):
    """Response model for refreshing every show."""
    message: str = "Refresh completed"
    total: int
    successful: int
    failed: int
    results: List[RefreshResult] = Field(default_factory=list)


class VideoImportResponse(BaseModel):
    """Response model for the watch-later import."""
    message: str = "Videos imported successfully"
    imported: int
    updated: int


class ErrorResponse(BaseModel):
    """
    Response model for error responses.

    Fields:
        error (str): Error message.
        requires_auth (bool): True when the client should prompt the user to reconnect.
    """
    error: str
    requires_auth: bool = False
