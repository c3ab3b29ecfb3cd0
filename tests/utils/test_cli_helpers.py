import click
import pytest
from unittest.mock import MagicMock
from models.results import ImportSummary, RefreshAllResult, RefreshResult
from utils import cli_helpers
from utils.cli_helpers import get_service_from_context, print_import_summary, print_refresh_summary


def test_get_service_from_context_returns_service():
    ctx = MagicMock(obj={"db": "database"})
    assert get_service_from_context(ctx, "db") == "database"


def test_get_service_from_context_missing_required():
    ctx = MagicMock(obj={"db": None})
    with pytest.raises(click.Abort):
        get_service_from_context(ctx, "db")


def test_get_service_from_context_missing_optional():
    ctx = MagicMock(obj={})
    assert get_service_from_context(ctx, "tmdb", required=False) is None


def test_print_import_summary_escapes_titles(mocker):
    printed = mocker.patch.object(cli_helpers.console, "print")
    summary = ImportSummary(total=2, skipped=1, not_found=["[rec]"])
    print_import_summary(summary)
    texts = [str(call.args[0]) for call in printed.call_args_list]
    assert any("\\[rec]" in text for text in texts)


def test_print_refresh_summary_renders_table(mocker):
    printed = mocker.patch.object(cli_helpers.console, "print")
    summary = RefreshAllResult(total=1, failed=1, results=[
        RefreshResult(tv_show_id=1, tv_show_title="Mock Show", success=False, error="boom"),
    ])
    print_refresh_summary(summary)
    printed.assert_called_once()
