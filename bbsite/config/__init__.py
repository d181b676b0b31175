"""Application configuration accessors.

Centralizes environment variable parsing & defaults. Every accessor reads
the environment on call so tests can monkeypatch variables without
reloading modules.
"""
from __future__ import annotations

import os
from functools import lru_cache

APP_NAME = "bbsite"
APP_VERSION = "0.4.0"
APP_DESCRIPTION = "Editorial site for a collaborative bibliographic database"

DEFAULT_DATABASE_URL = "sqlite:///bookbrainz.db"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOGIN_PATH = "/login"
DEFAULT_REVISIONS_PAGE_SIZE = 20
DEFAULT_REVISIONS_MAX_PAGE_SIZE = 100
DEFAULT_SUBMISSION_TIMEOUT = 15
_TRUE = {"1", "true", "yes", "on"}


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def env_bool(name: str, default: bool = False) -> bool:
    raw = _raw_env(name, str(default).lower())
    if raw is None:
        return default
    return raw.lower() in _TRUE


def env_int(name: str, default: int) -> int:
    raw = _raw_env(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def database_url() -> str:
    return _raw_env("BBSITE_DATABASE_URL", DEFAULT_DATABASE_URL)  # type: ignore[return-value]


def log_level_name() -> str:
    return _raw_env("BBSITE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()  # type: ignore[union-attr]


def secret_key() -> str:
    # Sessions only carry the editor id and locale preference.
    return _raw_env("BBSITE_SECRET_KEY", "bbsite-dev-secret")  # type: ignore[return-value]


def login_path() -> str:
    value = (_raw_env("BBSITE_LOGIN_PATH") or "").strip()
    return value or DEFAULT_LOGIN_PATH


def revisions_page_size() -> int:
    return max(1, env_int("BBSITE_REVISIONS_PAGE_SIZE", DEFAULT_REVISIONS_PAGE_SIZE))


def revisions_max_page_size() -> int:
    return max(1, env_int("BBSITE_REVISIONS_MAX_PAGE_SIZE", DEFAULT_REVISIONS_MAX_PAGE_SIZE))


def site_url() -> str | None:
    """Base URL used by the submission client (BBSITE_SITE_URL)."""
    value = os.getenv("BBSITE_SITE_URL")
    if value is None:
        return None
    value = value.strip().rstrip("/")
    return value or None


def submission_timeout() -> int:
    return max(1, env_int("BBSITE_SUBMISSION_TIMEOUT", DEFAULT_SUBMISSION_TIMEOUT))


def translation_dirs() -> list[str]:
    """Extra gettext catalog roots (BBSITE_TRANSLATION_DIRS, os.pathsep separated)."""
    raw = _raw_env("BBSITE_TRANSLATION_DIRS") or ""
    return [part.strip() for part in raw.split(os.pathsep) if part.strip()]


@lru_cache(maxsize=1)
def metadata() -> dict:
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
    }


def summarize_runtime_config() -> dict:
    return {
        "database_url": database_url(),
        "log_level": log_level_name(),
        "login_path": login_path(),
        "revisions_page_size": revisions_page_size(),
        "revisions_max_page_size": revisions_max_page_size(),
    }


__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "APP_DESCRIPTION",
    "env_bool",
    "env_int",
    "database_url",
    "log_level_name",
    "secret_key",
    "login_path",
    "revisions_page_size",
    "revisions_max_page_size",
    "site_url",
    "submission_timeout",
    "translation_dirs",
    "metadata",
    "summarize_runtime_config",
]
