"""Revision listing and statistics endpoint tests."""
from __future__ import annotations

import pytest

from bbsite.db.engine import init_engine_once, reset_for_tests
from bbsite.services import entity_submission_service
from bbsite.startup.wiring import create_app


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("BBSITE_DATABASE_URL", "sqlite:///:memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def client():
    return create_app({"TESTING": True}).test_client()


@pytest.fixture
def history(seed, work_payload):
    created = entity_submission_service.create_entity("Work", work_payload("Dune"), editor_id=seed.editor_id)
    bbid = created["entity"]["bbid"]
    entity_submission_service.edit_entity(
        "Work", bbid, work_payload("Dune (novel)"), editor_id=seed.other_editor_id
    )
    entity_submission_service.create_entity("Work", work_payload("Emma"), editor_id=seed.editor_id)
    return bbid


def test_revisions_listing(history, client):
    resp = client.get("/revisions")

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["from"] == 0
    assert data["size"] == 20
    assert data["total"] == 3
    names = [row["default_alias"]["name"] for row in data["results"]]
    assert names == ["Emma", "Dune (novel)", "Dune"]
    edit = data["results"][1]
    assert edit["editor"]["name"] == "bob"
    assert "author" not in edit
    assert edit["parent_alias"]["name"] == "Dune"
    assert edit["bbid"] == history


def test_revisions_listing_keeps_assembly_key_order(history, client):
    row = client.get("/revisions?size=1").get_json()["results"][0]
    keys = list(row)
    assert keys[0] == "revision_id"
    assert keys[-1] == "parent_alias"


def test_revisions_paging_params(history, client):
    data = client.get("/revisions?from=1&size=1").get_json()
    assert [row["default_alias"]["name"] for row in data["results"]] == ["Dune (novel)"]


@pytest.mark.parametrize(
    "query, code",
    [("from=-1", "invalid_from"), ("size=abc", "invalid_size"), ("size=0", "invalid_size")],
)
def test_revisions_bad_paging(client, query, code):
    resp = client.get(f"/revisions?{query}")
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == code
    assert body["message"]


def test_statistics_top_editors(history, client):
    resp = client.get("/statistics?days=30&limit=5")

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["days"] == 30
    assert data["limit"] == 5
    assert [(row["name"], row["revision_count"]) for row in data["top_editors"]] == [
        ("alice", 2),
        ("bob", 1),
    ]


def test_statistics_defaults_and_validation(history, client):
    data = client.get("/statistics").get_json()
    assert data["days"] is None
    assert data["limit"] == 10

    assert client.get("/statistics?limit=1000").get_json()["limit"] == 100
    resp = client.get("/statistics?days=-3")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "invalid_days"
    assert client.get("/statistics?limit=many").get_json()["error"] == "invalid_limit"
