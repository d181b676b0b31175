"""Tests for entity form steps: prefill extraction, validity and payloads."""
from __future__ import annotations

from dataclasses import replace

from bbsite.forms.steps import AliasesStep, EntityDataStep, RevisionNoteStep
from bbsite.forms.values import AliasRow, AliasesValue, EntityDataValue, IdentifierRow, RevisionNoteValue

WIKIDATA = {"id": 7, "label": "Wikidata ID", "entity_type": "Work", "validation_regex": r"Q\d+"}
FREEFORM = {"id": 8, "label": "Catalogue", "entity_type": "Work", "validation_regex": None}

PREFILL = {
    "bbid": "b3f0c8e2-0000-4000-8000-000000000001",
    "type": "Work",
    "default_alias": {"id": 11, "name": "Dune"},
    "alias_set": {
        "aliases": [
            {"id": 10, "name": "Duna", "sort_name": "Duna", "language_id": 2, "primary": False},
            {"id": 11, "name": "Dune", "sort_name": "Dune", "language_id": 1, "primary": True},
        ],
    },
    "languages": [{"id": 1, "name": "English"}],
    "work_type": {"id": 3, "label": "Novel"},
    "disambiguation": {"id": 4, "comment": "novel"},
    "annotation": {"id": 5, "content": "First published 1965."},
    "identifier_set": {
        "identifiers": [{"id": 6, "value": "Q190192", "type": {"id": 7}}],
    },
}


def test_aliases_step_without_prefill_starts_with_blank_default_row():
    value = AliasesStep().initial_value(None)
    assert value == AliasesValue(aliases=(AliasRow(default=True),))
    assert AliasesStep().is_valid(value) is False


def test_aliases_step_prefill_marks_default_alias():
    value = AliasesStep().initial_value(PREFILL)
    assert [(row.id, row.default) for row in value.aliases] == [(10, False), (11, True)]
    assert value.aliases[1].sort_name == "Dune"
    assert value.aliases[1].language == 1
    assert value.aliases[1].primary is True


def test_aliases_step_validity():
    step = AliasesStep()
    good = AliasesValue(aliases=(AliasRow(name="Dune", sort_name="Dune", default=True), AliasRow()))
    assert step.is_valid(good) is True
    assert step.is_valid(AliasesValue(aliases=(AliasRow(name="Dune", sort_name="", default=True),))) is False
    assert step.is_valid(AliasesValue(aliases=(AliasRow(name="Dune", sort_name="Dune"),))) is False
    two_defaults = AliasesValue(aliases=(
        AliasRow(name="Dune", sort_name="Dune", default=True),
        AliasRow(name="Duna", sort_name="Duna", default=True),
    ))
    assert step.is_valid(two_defaults) is False


def test_aliases_step_payload_drops_blank_rows():
    value = AliasesValue(aliases=(AliasRow(name=" Dune ", sort_name="Dune", language=1, default=True), AliasRow()))
    assert AliasesStep().to_payload(value) == {
        "aliases": [
            {"id": None, "name": "Dune", "sortName": "Dune", "language": 1, "primary": False, "default": True},
        ],
    }


def test_data_step_prefill_extraction():
    step = EntityDataStep("Work", "workTypeId", [WIKIDATA])
    value = step.initial_value(PREFILL)
    assert value == EntityDataValue(
        languages=(1,),
        type_id=3,
        disambiguation="novel",
        annotation="First published 1965.",
        identifiers=(IdentifierRow(id=6, value="Q190192", type=7),),
    )


def test_data_step_prefill_is_defensive():
    step = EntityDataStep("Work", "workTypeId", [WIKIDATA])
    value = step.initial_value({"disambiguation": None, "annotation": None, "identifier_set": None})
    assert value.disambiguation is None
    assert value.annotation is None
    assert value.identifiers == ()
    assert step.initial_value(None) == EntityDataValue()


def test_data_step_identifier_validity():
    step = EntityDataStep("Work", "workTypeId", [WIKIDATA, FREEFORM])
    assert step.is_valid(EntityDataValue(identifiers=(IdentifierRow(value="Q42", type=7),))) is True
    assert step.is_valid(EntityDataValue(identifiers=(IdentifierRow(value="42", type=7),))) is False
    assert step.is_valid(EntityDataValue(identifiers=(IdentifierRow(value="anything", type=8),))) is True
    assert step.is_valid(EntityDataValue(identifiers=(IdentifierRow(value="Q42", type=99),))) is False
    # Blank rows are left out of the check.
    assert step.is_valid(EntityDataValue(identifiers=(IdentifierRow(value="  ", type=None),))) is True


def test_data_step_payload():
    step = EntityDataStep("Work", "workTypeId", [WIKIDATA])
    value = replace(
        step.initial_value(PREFILL),
        identifiers=(IdentifierRow(id=6, value="Q190192", type=7), IdentifierRow()),
    )
    assert step.to_payload(value) == {
        "languages": [1],
        "workTypeId": 3,
        "disambiguation": "novel",
        "annotation": "First published 1965.",
        "identifiers": [{"id": 6, "value": "Q190192", "type": 7}],
    }
    assert "editionTypeId" not in EntityDataStep("Edition").to_payload(EntityDataValue())
    assert set(EntityDataStep("Edition").to_payload(EntityDataValue())) == {
        "languages", "disambiguation", "annotation", "identifiers",
    }


def test_revision_note_step():
    step = RevisionNoteStep()
    value = step.initial_value(PREFILL)
    assert value == RevisionNoteValue()
    assert step.is_valid(value) is True
    assert step.to_payload(RevisionNoteValue(note="fixed typo")) == {"note": "fixed typo"}
