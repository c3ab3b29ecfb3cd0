import json
import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from api.dependencies import get_video_service
from api.main import app
from api.services.video_service import VideoService
from models.show import Show
from utils.errors import AuthenticationRequiredError, YouTubeError
from utils.watch_later_importer import WatchLaterImporter


@pytest.fixture
def services(config, db_service, mock_tmdb_service, mock_credential_provider, zero_pacing):
    return {
        "db": db_service,
        "tmdb": mock_tmdb_service,
        "credential_provider": mock_credential_provider,
        "pacing": zero_pacing,
        "config": config,
    }


@pytest.fixture
def client(services):
    """TestClient with services attached directly; the startup lifespan is not run."""
    app.state.services = services
    yield TestClient(app)
    app.state.services = None
    app.dependency_overrides.clear()


def feed(*pairs):
    return json.dumps({"result": [list(pair) for pair in pairs]}).encode()


# ────────────────────────────────────────────────
# ROOT / HEALTH
# ────────────────────────────────────────────────

def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "WatchSync API"


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["database"] == "ok"
    assert body["tmdb"] == "ok"


def test_health_reports_database_errors(client, services):
    services["db"] = MagicMock()
    services["db"].get_all_shows.side_effect = RuntimeError("disk I/O error")
    body = client.get("/health").json()
    assert body["status"] == "unhealthy"
    assert "disk I/O error" in body["database"]


# ────────────────────────────────────────────────
# IMPORTS
# ────────────────────────────────────────────────

def test_import_tmdb(client, db_service):
    files = {"file": ("saved.json", feed(("tmdb:550", 1704067200000), ("tmdb:999999", 1)), "application/json")}
    response = client.post("/api/import/tmdb", files=files)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Import completed"
    assert (body["total"], body["imported"], body["movies"], body["skipped"]) == (2, 1, 1, 1)
    assert db_service.get_movie_by_tmdb_id(550) is not None
    movie = body["results"][0]
    assert (movie["status"], movie["title"]) == ("ok", "Fight Club")
    assert movie["poster_url"] == "https://image.tmdb.org/t/p/w500/fight.jpg"
    assert body["results"][1]["reason"] == "not_found"


def test_import_tmdb_twice_reports_existing(client):
    files = {"file": ("saved.json", feed(("550", 1704067200000)), "application/json")}
    client.post("/api/import/tmdb", files=files)
    body = client.post("/api/import/tmdb", files=files).json()
    assert (body["imported"], body["existing"]) == (0, 1)


def test_import_imdb(client):
    files = {"file": ("saved.json", feed(("tt0944947", 1704067200000)), "application/json")}
    body = client.post("/api/import/imdb", files=files).json()
    assert body["tv_shows"] == 1


def test_import_malformed_feed(client):
    files = {"file": ("saved.json", b"not json", "application/json")}
    response = client.post("/api/import/tmdb", files=files)
    assert response.status_code == 400
    assert "Invalid feed file" in response.json()["detail"]


def test_import_letterboxd(client, mock_tmdb_service):
    mock_tmdb_service.search_movies.return_value = {"results": [{"id": 9, "title": "Parasite", "release_date": "1998-01-01"}]}
    content = b"Date,Name,Year,Letterboxd URI\n2024-03-01,Parasite,2019,https://boxd.it/hTha\n"
    files = {"file": ("watchlist.csv", content, "text/csv")}
    body = client.post("/api/import/letterboxd", files=files).json()
    assert body["not_found"] == ["Parasite"]
    assert body["skipped"] == 1
    assert body["errors"] == 0


def test_import_letterboxd_rejects_non_csv(client):
    files = {"file": ("watchlist.json", b"{}", "application/json")}
    response = client.post("/api/import/letterboxd", files=files)
    assert response.status_code == 400


# ────────────────────────────────────────────────
# SHOWS
# ────────────────────────────────────────────────

def test_refresh_show_episodes(client, db_service):
    show_id = db_service.add_show(Show(tmdb_id=1399, title="Mock Show"))
    response = client.post(f"/api/shows/{show_id}/episodes/refresh")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert (body["new_episodes"], body["updated_episodes"]) == (2, 0)


def test_refresh_unknown_show_is_404(client):
    response = client.post("/api/shows/999/episodes/refresh")
    assert response.status_code == 404
    assert response.json()["error"] == "TV show 999 not found"


def test_refresh_upstream_failure_is_500(client, db_service):
    show_id = db_service.add_show(Show(tmdb_id=2, title="Gone Upstream"))
    response = client.post(f"/api/shows/{show_id}/episodes/refresh")
    assert response.status_code == 500


def test_refresh_all_episodes(client, db_service):
    db_service.add_show(Show(tmdb_id=1399, title="Mock Show"))
    db_service.add_show(Show(tmdb_id=2, title="Gone Upstream"))
    db_service.add_show(Show(tmdb_id=3, title="Archived", is_archived=True))

    body = client.post("/api/shows/episodes/refresh").json()
    assert (body["total"], body["successful"], body["failed"]) == (2, 1, 1)

    body = client.post("/api/shows/episodes/refresh", params={"include_archived": True}).json()
    assert body["total"] == 3


# ────────────────────────────────────────────────
# VIDEOS
# ────────────────────────────────────────────────

def override_video_service(services, youtube):
    importer = WatchLaterImporter(services["db"], services["credential_provider"], client_factory=lambda creds: youtube)
    app.dependency_overrides[get_video_service] = lambda: VideoService(importer)


def test_import_watch_later(client, services):
    youtube = MagicMock()
    youtube.get_channel_related_playlists.return_value = {"watchLater": "WL"}
    youtube.list_playlist_items.return_value = {"items": [{"contentDetails": {"videoId": "abc"}, "snippet": {}}]}
    youtube.list_video_details.return_value = [{"id": "abc", "snippet": {"title": "Talk"}, "contentDetails": {}}]
    override_video_service(services, youtube)

    response = client.post("/api/videos/import/watch-later")

    assert response.status_code == 200
    assert response.json() == {"message": "Videos imported successfully", "imported": 1, "updated": 0}


def test_import_watch_later_requires_auth(client, services):
    services["credential_provider"].get_valid_credential.side_effect = AuthenticationRequiredError()
    override_video_service(services, MagicMock())

    response = client.post("/api/videos/import/watch-later")

    assert response.status_code == 401
    body = response.json()
    assert body["requires_auth"] is True
    assert "authentication required" in body["error"]


def test_import_watch_later_playlist_missing(client, services):
    youtube = MagicMock()
    youtube.get_channel_related_playlists.return_value = {}
    youtube.list_playlist_items.side_effect = YouTubeError("playlistNotFound", status_code=404)
    youtube.list_owned_playlists.return_value = {"items": []}
    override_video_service(services, youtube)

    response = client.post("/api/videos/import/watch-later")

    assert response.status_code == 404
    assert response.json()["error"] == "Watch later playlist not found"


def test_import_watch_later_unexpected_error(client, services):
    youtube = MagicMock()
    youtube.get_channel_related_playlists.side_effect = RuntimeError("unexpected")
    override_video_service(services, youtube)

    response = client.post("/api/videos/import/watch-later")

    assert response.status_code == 500


# ────────────────────────────────────────────────
# STARTUP
# ────────────────────────────────────────────────

def test_lifespan_builds_services_from_config(test_config_path, db_service, monkeypatch, mocker):
    mocker.patch("api.main.setup_logging")
    monkeypatch.setenv("WATCHSYNC_CONFIG", str(test_config_path))
    app.state.services = None
    try:
        with TestClient(app) as client:
            body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["tmdb"] == "ok"
    finally:
        app.state.services = None
