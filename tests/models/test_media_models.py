import datetime
import pytest
from pydantic import ValidationError
from models.media import CanonicalMediaRef, IdSpace, ImportEntry, LetterboxdEntry, MediaKind, Skipped


def test_import_entry_saved_at_is_utc():
    entry = ImportEntry(external_ref="tmdb:550", saved_at_millis=1704067200000)
    assert entry.saved_at == datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)


def test_import_entry_is_frozen():
    entry = ImportEntry(external_ref="550", saved_at_millis=0)
    with pytest.raises(ValidationError):
        entry.external_ref = "551"


def test_canonical_ref_requires_positive_id():
    with pytest.raises(ValidationError):
        CanonicalMediaRef(canonical_id=0, media_kind=MediaKind.MOVIE)


def test_canonical_ref_accepts_kind_string():
    ref = CanonicalMediaRef(canonical_id=1399, media_kind="tv")
    assert ref.media_kind == MediaKind.TV


def test_letterboxd_entry_requires_title():
    with pytest.raises(ValidationError):
        LetterboxdEntry(watched_date=datetime.datetime(2024, 1, 1), title="", year=2019)


def test_skipped_carries_reason():
    skipped = Skipped(reason="unsupported_format", raw="abc")
    assert skipped.reason == "unsupported_format"
    assert skipped.raw == "abc"


def test_id_space_values():
    assert IdSpace("tmdb") is IdSpace.TMDB
    assert IdSpace("imdb") is IdSpace.IMDB
