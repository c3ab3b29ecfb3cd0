import pytest
from click.testing import CliRunner
from cli.refresh_episodes import refresh_episodes
from models.show import Show


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def show_id(cli_obj):
    return cli_obj["db"].add_show(Show(tmdb_id=1399, title="Mock Show"))


def test_refresh_single_show(runner, cli_obj, show_id):
    result = runner.invoke(refresh_episodes, ["--show-id", str(show_id)], obj=cli_obj)
    assert result.exit_code == 0, result.output
    assert "Mock Show: 2 new, 0 updated episodes" in result.output
    assert len(cli_obj["db"].get_episodes_by_show_id(show_id)) == 2


def test_refresh_requires_exactly_one_target(runner, cli_obj):
    assert runner.invoke(refresh_episodes, [], obj=cli_obj).exit_code == 2
    assert runner.invoke(refresh_episodes, ["--show-id", "1", "--all"], obj=cli_obj).exit_code == 2


def test_refresh_unknown_show(runner, cli_obj):
    result = runner.invoke(refresh_episodes, ["--show-id", "999"], obj=cli_obj)
    assert result.exit_code == 1
    assert "TV show 999 not found" in result.output


def test_refresh_upstream_failure(runner, cli_obj):
    show_id = cli_obj["db"].add_show(Show(tmdb_id=2, title="Gone Upstream"))
    result = runner.invoke(refresh_episodes, ["--show-id", str(show_id)], obj=cli_obj)
    assert result.exit_code == 1
    assert "Failed to refresh episodes for Gone Upstream" in result.output


def test_refresh_all_reports_failures(runner, cli_obj, show_id):
    cli_obj["db"].add_show(Show(tmdb_id=2, title="Gone Upstream"))
    result = runner.invoke(refresh_episodes, ["--all"], obj=cli_obj)
    assert result.exit_code == 1
    assert "1/2 succeeded" in result.output


def test_refresh_all_success(runner, cli_obj, show_id):
    result = runner.invoke(refresh_episodes, ["--all"], obj=cli_obj)
    assert result.exit_code == 0, result.output
    assert "1/1 succeeded" in result.output
