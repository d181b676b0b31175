"""Integration tests for entity_submission_service create/edit flows."""
from __future__ import annotations

import pytest

from bbsite.db import app_session
from bbsite.db.engine import init_engine_once, reset_for_tests
from bbsite.db.models import Entity, Identifier, Note, Revision, Work
from bbsite.db.repositories import editors_repo, entities_repo, revisions_repo
from bbsite.services import entity_submission_service as svc
from bbsite.utils.entities import UnrecognizedEntityTypeError


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("BBSITE_DATABASE_URL", "sqlite:///:memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def _count(model) -> int:
    with app_session() as session:
        return session.query(model).count()


def test_create_entity_writes_first_revision(seed, work_payload):
    result = svc.create_entity("Work", work_payload("Dune"), editor_id=seed.editor_id)

    entity = result["entity"]
    assert entity["type"] == "Work"
    assert entity["bbid"]
    assert entity["master_revision_id"] == result["revision_id"]
    assert entity["default_alias"]["name"] == "Dune"
    assert editors_repo.get_editor(seed.editor_id)["edit_count"] == 1
    assert _count(Revision) == 1
    assert _count(Note) == 1

    snapshot = entities_repo.get_entity_snapshot("Work", entity["bbid"])
    assert snapshot["work_type"]["id"] == seed.novel_id
    assert snapshot["annotation"]["content"] == "First published in 1965."
    assert snapshot["annotation"]["last_revision_id"] == result["revision_id"]
    assert [language["id"] for language in snapshot["languages"]] == [seed.english_id]


def test_edit_entity_appends_revision_with_parent(seed, work_payload):
    created = svc.create_entity("Work", work_payload("Dune"), editor_id=seed.editor_id)
    bbid = created["entity"]["bbid"]

    edited = svc.edit_entity("Work", bbid, work_payload("Dune (novel)", note=""), editor_id=seed.editor_id)

    assert edited["entity"]["bbid"] == bbid
    assert edited["entity"]["master_revision_id"] == edited["revision_id"]
    assert edited["revision_id"] != created["revision_id"]
    assert editors_repo.get_editor(seed.editor_id)["edit_count"] == 2
    assert _count(Note) == 1
    assert _count(Entity) == 1

    newest = revisions_repo.get_ordered_revisions(0, 1)[0]
    assert newest["parent_ids"] == [created["revision_id"]]
    assert newest["parent_alias"]["name"] == "Dune"


def test_blank_alias_rows_are_ignored(seed, work_payload):
    payload = work_payload("Dune")
    payload["aliases"].append({"name": " ", "sortName": "", "default": False})
    result = svc.create_entity("Work", payload, editor_id=seed.editor_id)
    snapshot = entities_repo.get_entity_snapshot("Work", result["entity"]["bbid"])
    assert len(snapshot["alias_set"]["aliases"]) == 1


@pytest.mark.parametrize(
    "overrides, code",
    [
        ({"aliases": []}, "aliases_required"),
        ({"aliases": [{"name": "Dune", "sortName": "", "default": True}]}, "alias_incomplete"),
        ({"aliases": [{"name": "Dune", "sortName": "Dune", "default": False}]}, "default_alias_required"),
        (
            {"aliases": [
                {"name": "Dune", "sortName": "Dune", "default": True},
                {"name": "Duna", "sortName": "Duna", "default": True},
            ]},
            "multiple_default_aliases",
        ),
        ({"aliases": "Dune"}, "invalid_aliases"),
        ({"workTypeId": "novel"}, "invalid_type_id"),
        ({"languages": ["english"]}, "invalid_language"),
        ({"identifiers": [{"value": "Q1"}]}, "invalid_identifier_type"),
        ({"disambiguation": 42}, "invalid_text"),
    ],
)
def test_parse_payload_rejects_malformed_input(work_payload, overrides, code):
    with pytest.raises(svc.SubmissionValidationError) as excinfo:
        svc.parse_payload("Work", work_payload(**overrides))
    assert str(excinfo.value) == code


def test_parse_payload_rejects_non_mapping():
    with pytest.raises(svc.SubmissionValidationError) as excinfo:
        svc.parse_payload("Work", ["not", "a", "dict"])
    assert str(excinfo.value) == "invalid_payload"


def test_parse_payload_ignores_type_id_for_types_without_vocabulary():
    parsed = svc.parse_payload(
        "Edition",
        {"aliases": [{"name": "Dune", "sortName": "Dune", "default": True}], "workTypeId": 3},
    )
    assert parsed.type_id is None
    assert parsed.default_alias.name == "Dune"


def test_type_id_key():
    assert svc.type_id_key("Work") == "workTypeId"
    assert svc.type_id_key("EditionGroup") == "editionGroupTypeId"


@pytest.mark.parametrize(
    "overrides, code",
    [
        ({"workTypeId": 9999}, "unknown_type_id"),
        ({"languages": [9999]}, "unknown_language"),
        ({"identifiers": [{"value": "Q1", "type": 9999}]}, "unknown_identifier_type"),
        ({"identifiers": [{"value": "not-a-qid", "type": None}]}, "invalid_identifier_type"),
    ],
)
def test_create_rejects_unknown_references(seed, work_payload, overrides, code):
    with pytest.raises(svc.SubmissionValidationError) as excinfo:
        svc.create_entity("Work", work_payload(**overrides), editor_id=seed.editor_id)
    assert str(excinfo.value) == code
    assert _count(Entity) == 0


def test_create_rejects_identifier_value_and_foreign_type(seed, work_payload):
    with pytest.raises(svc.SubmissionValidationError) as excinfo:
        svc.create_entity(
            "Work",
            work_payload(identifiers=[{"value": "190192", "type": seed.wikidata_id}]),
            editor_id=seed.editor_id,
        )
    assert str(excinfo.value) == "invalid_identifier_value"

    with pytest.raises(svc.SubmissionValidationError) as excinfo:
        svc.create_entity(
            "Work",
            work_payload(identifiers=[{"value": "9780441013593", "type": seed.isbn_id}]),
            editor_id=seed.editor_id,
        )
    assert str(excinfo.value) == "identifier_type_not_allowed"


def test_edit_keeps_foreign_identifier_types_already_on_entity(seed, work_payload):
    created = svc.create_entity("Work", work_payload("Dune"), editor_id=seed.editor_id)
    bbid = created["entity"]["bbid"]
    with app_session() as session:
        row = session.get(Work, bbid).master_entity_revision()
        row.data.identifier_set.identifiers.append(Identifier(type_id=seed.isbn_id, value="9780441013593"))

    edited = svc.edit_entity(
        "Work",
        bbid,
        work_payload(identifiers=[
            {"value": "Q190192", "type": seed.wikidata_id},
            {"value": "9780441013593", "type": seed.isbn_id},
        ]),
        editor_id=seed.editor_id,
    )
    snapshot = entities_repo.get_entity_snapshot("Work", bbid)
    assert snapshot["master_revision_id"] == edited["revision_id"]
    assert sorted(i["value"] for i in snapshot["identifier_set"]["identifiers"]) == [
        "9780441013593",
        "Q190192",
    ]


def test_unknown_editor_rolls_back(seed, work_payload):
    with pytest.raises(svc.EditorNotFoundError):
        svc.create_entity("Work", work_payload(), editor_id=9999)
    assert _count(Entity) == 0
    assert _count(Revision) == 0


def test_edit_missing_entity(seed, work_payload):
    with pytest.raises(svc.EntityNotFoundError):
        svc.edit_entity("Work", "00000000-0000-4000-8000-000000000000", work_payload(), editor_id=seed.editor_id)


def test_unknown_entity_type(seed, work_payload):
    with pytest.raises(UnrecognizedEntityTypeError):
        svc.create_entity("Series", work_payload(), editor_id=seed.editor_id)
