import datetime
import os
import sqlite3
import pytest
from models.episode import Episode
from models.movie import Movie
from models.show import Show
from models.video import Video, VideoState
from services.db_implementations.sqlite_implementation import SQLiteDBService
from utils.errors import UniqueConstraintError

UTC = datetime.timezone.utc


@pytest.fixture
def db(tmp_path):
    """Fixture providing an initialized SQLite database in a temp directory."""
    service = SQLiteDBService(str(tmp_path / "data" / "watchsync.db"))
    service.initialize()
    return service


@pytest.fixture
def show_id(db):
    return db.add_show(Show(tmdb_id=1399, title="Mock Show", first_air_date=datetime.date(2011, 4, 17)))


def make_video(youtube_id="abc", state=None):
    return Video(
        youtube_id=youtube_id,
        title="Talk",
        youtube_url=f"https://www.youtube.com/watch?v={youtube_id}",
        published_at=datetime.datetime(2023, 5, 1, 12, 0, tzinfo=UTC),
        state=state,
    )


def test_initialize_creates_directory_and_tables(db):
    assert os.path.exists(db.db_file)
    with sqlite3.connect(db.db_file) as conn:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"tv_shows", "movies", "episodes", "videos"} <= tables


def test_initialize_is_idempotent(db, show_id):
    db.initialize()
    assert db.get_show_by_id(show_id)["title"] == "Mock Show"


def test_add_and_get_show_converts_types(db, show_id):
    saved_at = datetime.datetime(2024, 1, 1, tzinfo=UTC)
    db.update_show(show_id, {"saved_at": saved_at})
    record = db.get_show_by_tmdb_id(1399)
    assert record["id"] == show_id
    assert record["first_air_date"] == datetime.date(2011, 4, 17)
    assert record["saved_at"] == saved_at
    assert isinstance(record["created_at"], datetime.datetime)


def test_duplicate_show_raises_unique_constraint(db, show_id):
    with pytest.raises(UniqueConstraintError):
        db.add_show(Show(tmdb_id=1399, title="Duplicate"))


def test_update_show_rejects_unknown_field(db, show_id):
    with pytest.raises(ValueError, match="tmdb_id"):
        db.update_show(show_id, {"tmdb_id": 1})


def test_get_all_shows_excludes_archived(db, show_id):
    archived_id = db.add_show(Show(tmdb_id=2, title="Archived", is_archived=True))
    assert [s["id"] for s in db.get_all_shows()] == [show_id, archived_id]
    assert [s["id"] for s in db.get_all_shows(include_archived=False)] == [show_id]


def test_missing_show_returns_none(db):
    assert db.get_show_by_id(999) is None
    assert db.get_show_by_tmdb_id(999) is None


def test_add_and_update_movie(db):
    movie_id = db.add_movie(Movie(tmdb_id=550, imdb_id="tt0137523", title="Fight Club"))
    db.update_movie(movie_id, {"title": "Fight Club (1999)"})
    record = db.get_movie_by_tmdb_id(550)
    assert record["title"] == "Fight Club (1999)"
    assert record["imdb_id"] == "tt0137523"
    assert len(db.get_all_movies()) == 1
    with pytest.raises(UniqueConstraintError):
        db.add_movie(Movie(tmdb_id=550, title="Again"))


def test_episode_key_is_unique_per_show(db, show_id):
    db.add_episode(Episode(tv_show_id=show_id, season_number=1, episode_number=1, name="Pilot"))
    with pytest.raises(UniqueConstraintError):
        db.add_episode(Episode(tv_show_id=show_id, season_number=1, episode_number=1, name="Pilot again"))


def test_upsert_episode_refreshes_descriptive_fields(db, show_id):
    watched_at = datetime.datetime(2024, 3, 1, 21, 30)
    db.add_episode(Episode(
        tv_show_id=show_id, season_number=1, episode_number=1, name="Old",
        is_watched=True, watched_at=watched_at,
    ))
    db.upsert_episode(Episode(tv_show_id=show_id, season_number=1, episode_number=1, name="New", runtime=60))
    episodes = db.get_episodes_by_show_id(show_id)
    assert len(episodes) == 1
    assert episodes[0]["name"] == "New"
    assert episodes[0]["runtime"] == 60
    assert episodes[0]["is_watched"] == 1
    assert episodes[0]["watched_at"] == watched_at


def test_upsert_episode_inserts_missing_row(db, show_id):
    db.upsert_episode(Episode(tv_show_id=show_id, season_number=2, episode_number=1, name="Fresh"))
    episodes = db.get_episodes_by_show_id(show_id)
    assert [(e["season_number"], e["episode_number"], e["is_watched"]) for e in episodes] == [(2, 1, 0)]


def test_episodes_ordered_by_season_and_number(db, show_id):
    for season, number in [(2, 1), (1, 2), (1, 1)]:
        db.add_episode(Episode(tv_show_id=show_id, season_number=season, episode_number=number))
    keys = [(e["season_number"], e["episode_number"]) for e in db.get_episodes_by_show_id(show_id)]
    assert keys == [(1, 1), (1, 2), (2, 1)]


def test_episode_requires_existing_show(db):
    with pytest.raises(sqlite3.IntegrityError):
        db.add_episode(Episode(tv_show_id=42, season_number=1, episode_number=1))


def test_add_video_defaults_to_feed(db):
    db.add_video(make_video())
    record = db.get_video_by_youtube_id("abc")
    assert record["state"] == VideoState.FEED.value
    assert record["published_at"] == datetime.datetime(2023, 5, 1, 12, 0, tzinfo=UTC)


def test_update_video_cannot_change_state(db):
    video_id = db.add_video(make_video(state=VideoState.INBOX))
    db.update_video(video_id, {"title": "Renamed"})
    with pytest.raises(ValueError):
        db.update_video(video_id, {"state": "archive"})
    record = db.get_video_by_youtube_id("abc")
    assert record["title"] == "Renamed"
    assert record["state"] == "inbox"


def test_get_all_videos_by_state(db):
    db.add_video(make_video("a"))
    db.add_video(make_video("b", state=VideoState.ARCHIVE))
    assert len(db.get_all_videos()) == 2
    assert [v["youtube_id"] for v in db.get_all_videos(state="archive")] == ["b"]


def test_duplicate_video_raises_unique_constraint(db):
    db.add_video(make_video())
    with pytest.raises(UniqueConstraintError):
        db.add_video(make_video())


def test_read_only_service_reads_but_cannot_initialize(db, show_id):
    read_only = SQLiteDBService(db.db_file, read_only=True)
    assert read_only.get_show_by_id(show_id)["title"] == "Mock Show"
    with pytest.raises(RuntimeError):
        read_only.initialize()


def test_read_only_service_rejects_writes(db):
    read_only = SQLiteDBService(db.db_file, read_only=True)
    with pytest.raises(sqlite3.OperationalError):
        read_only.add_show(Show(tmdb_id=5, title="Nope"))


def test_backup_database(db):
    backup_path = db.backup_database()
    assert os.path.exists(backup_path)
    assert os.path.normpath(os.path.join("backups", "sqlite")) in os.path.normpath(backup_path)


def test_backup_missing_database(tmp_path):
    with pytest.raises(FileNotFoundError):
        SQLiteDBService(str(tmp_path / "missing.db")).backup_database()
