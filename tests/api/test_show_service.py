import asyncio
import pytest
from unittest.mock import MagicMock
from api.services.show_service import ShowService
from models.results import RefreshAllResult, RefreshResult
from utils.errors import NotFoundError


def asyncio_run(coro):
    return asyncio.run(coro)


def test_refresh_episodes_delegates_to_refresher():
    refresher = MagicMock()
    refresher.refresh_one.return_value = RefreshResult(tv_show_id=1, tv_show_title="Mock Show", success=True, new_episodes=2)
    result = asyncio_run(ShowService(refresher).refresh_episodes(1))
    assert result.new_episodes == 2
    refresher.refresh_one.assert_called_once_with(1)


def test_refresh_episodes_not_found_propagates():
    refresher = MagicMock()
    refresher.refresh_one.side_effect = NotFoundError("TV show 1 not found")
    with pytest.raises(NotFoundError):
        asyncio_run(ShowService(refresher).refresh_episodes(1))


def test_refresh_all_episodes_passes_archived_flag():
    refresher = MagicMock()
    refresher.refresh_all.return_value = RefreshAllResult(total=3, successful=3)
    result = asyncio_run(ShowService(refresher).refresh_all_episodes(include_archived=True))
    assert result.successful == 3
    refresher.refresh_all.assert_called_once_with(True)
