"""Tests for environment-backed configuration accessors."""
from __future__ import annotations

from bbsite import config


def test_defaults(monkeypatch):
    for name in (
        "BBSITE_DATABASE_URL",
        "BBSITE_LOG_LEVEL",
        "BBSITE_LOGIN_PATH",
        "BBSITE_REVISIONS_PAGE_SIZE",
        "BBSITE_SITE_URL",
        "BBSITE_SUBMISSION_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)

    assert config.database_url() == "sqlite:///bookbrainz.db"
    assert config.log_level_name() == "INFO"
    assert config.login_path() == "/login"
    assert config.revisions_page_size() == 20
    assert config.site_url() is None
    assert config.submission_timeout() == 15


def test_overrides(monkeypatch):
    monkeypatch.setenv("BBSITE_LOG_LEVEL", "debug")
    monkeypatch.setenv("BBSITE_LOGIN_PATH", "  ")
    monkeypatch.setenv("BBSITE_REVISIONS_PAGE_SIZE", "not-a-number")
    monkeypatch.setenv("BBSITE_REVISIONS_MAX_PAGE_SIZE", "0")
    monkeypatch.setenv("BBSITE_SITE_URL", " https://bb.example/ ")

    assert config.log_level_name() == "DEBUG"
    assert config.login_path() == "/login"
    assert config.revisions_page_size() == 20
    assert config.revisions_max_page_size() == 1
    assert config.site_url() == "https://bb.example"


def test_env_bool(monkeypatch):
    monkeypatch.setenv("BBSITE_FLAG", "Yes")
    assert config.env_bool("BBSITE_FLAG") is True
    monkeypatch.setenv("BBSITE_FLAG", "off")
    assert config.env_bool("BBSITE_FLAG", True) is False
    monkeypatch.delenv("BBSITE_FLAG")
    assert config.env_bool("BBSITE_FLAG", True) is True


def test_summarize_runtime_config(monkeypatch):
    monkeypatch.setenv("BBSITE_DATABASE_URL", "sqlite:///:memory:")
    summary = config.summarize_runtime_config()
    assert summary["database_url"] == "sqlite:///:memory:"
    assert set(summary) == {
        "database_url",
        "log_level",
        "login_path",
        "revisions_page_size",
        "revisions_max_page_size",
    }
    assert config.metadata()["name"] == "bbsite"
