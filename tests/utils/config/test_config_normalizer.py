import configparser
import pytest
from utils.config.config_normalizer import ConfigNormalizer


@pytest.fixture
def normalizer():
    return ConfigNormalizer()


@pytest.fixture(autouse=True)
def clear_watchsync_env(monkeypatch):
    for env_var in ConfigNormalizer.ENV_VAR_MAPPING:
        monkeypatch.delenv(env_var, raising=False)


def test_normalize_config_lowercases_sections_and_keys(normalizer):
    parser = configparser.ConfigParser()
    parser.read_dict({"TMDB": {"API_KEY": "abc"}, "SQLite": {"db_file": "x.db"}})
    normalized = normalizer.normalize_config(parser)
    assert normalized == {"tmdb": {"api_key": "abc"}, "sqlite": {"db_file": "x.db"}}


def test_duplicate_sections_prefer_lowercase(normalizer):
    normalized = normalizer.normalize_config({
        "TMDB": {"api_key": "upper", "timeout": "5"},
        "tmdb": {"api_key": "lower"},
    })
    assert normalized["tmdb"] == {"api_key": "lower", "timeout": "5"}


def test_unknown_sections_are_kept(normalizer):
    assert "custom" in normalizer.normalize_config({"Custom": {"a": "1"}})


def test_env_overrides(normalizer, monkeypatch):
    monkeypatch.setenv("WATCHSYNC_TMDB_API_KEY", "from-env")
    monkeypatch.setenv("WATCHSYNC_ENTRY_DELAY", "2")
    config = normalizer.normalize_and_override({"TMDB": {"api_key": "from-file"}})
    assert config["tmdb"]["api_key"] == "from-env"
    assert config["pacing"]["entry_delay"] == "2"


def test_env_overrides_do_not_mutate_input(normalizer, monkeypatch):
    monkeypatch.setenv("WATCHSYNC_DB_FILE", "/tmp/env.db")
    original = {"sqlite": {"db_file": "file.db"}}
    normalizer.apply_env_overrides(original)
    assert original["sqlite"]["db_file"] == "file.db"


def test_canonical_section(normalizer):
    assert normalizer.canonical_section("YOUTUBE") == "youtube"
    assert normalizer.canonical_section("Other") == "other"


def test_supported_env_vars_is_a_copy(normalizer):
    env_vars = normalizer.get_supported_env_vars()
    env_vars.pop("WATCHSYNC_DB_FILE")
    assert "WATCHSYNC_DB_FILE" in normalizer.get_supported_env_vars()
