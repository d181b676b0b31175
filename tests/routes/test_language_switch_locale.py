"""Locale selection and language switch behavior tests."""
from __future__ import annotations

import pytest

from bbsite.db.engine import init_engine_once, reset_for_tests
from bbsite.i18n.preferences import SESSION_LOCALE_KEY, normalize_language_choice
from bbsite.startup.wiring import create_app


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("BBSITE_DATABASE_URL", "sqlite:///:memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def flask_app():
    return create_app({"TESTING": True, "SECRET_KEY": "locale-test-secret"})


def _language_names(client, **kwargs):
    return [language["name"] for language in client.get("/work/create", **kwargs).get_json()["languages"]]


def test_default_locale_is_english(seed, flask_app):
    assert _language_names(flask_app.test_client()) == ["English", "German"]


def test_accept_language_header_selects_locale(seed, flask_app):
    names = _language_names(flask_app.test_client(), headers={"Accept-Language": "de-DE,de;q=0.9"})
    assert names == ["Deutsch", "Englisch"]


def test_language_switch_scoped_per_client(seed, flask_app):
    client_one = flask_app.test_client()
    client_two = flask_app.test_client()

    resp = client_one.post("/language/switch", json={"language": "de"})
    assert resp.status_code == 200
    assert resp.get_json()["language"] == "de"
    with client_one.session_transaction() as sess:
        assert sess[SESSION_LOCALE_KEY] == "de"

    assert _language_names(client_one) == ["Deutsch", "Englisch"]
    assert _language_names(client_two) == ["English", "German"]


def test_language_switch_rejects_unsupported(flask_app):
    resp = flask_app.test_client().post("/language/switch", json={"language": "tlh"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "unsupported_language"


def test_normalize_language_choice():
    assert normalize_language_choice("pt_BR") == "pt"
    assert normalize_language_choice(" DE-at ") == "de"
    assert normalize_language_choice("tlh") is None
    assert normalize_language_choice(None) is None
