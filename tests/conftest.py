"""Shared seed data for database-backed tests.

Each test module still owns its autouse ``in_memory_db`` fixture; the
fixtures here only fill the fresh database with reference rows.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict

import pytest

from bbsite.db import app_session
from bbsite.db.models import Editor, IdentifierType, Language, WorkType


@dataclass(frozen=True)
class Seed:
    editor_id: int
    other_editor_id: int
    english_id: int
    german_id: int
    novel_id: int
    poem_id: int
    wikidata_id: int
    isbn_id: int
    viaf_id: int


@pytest.fixture
def seed(in_memory_db) -> Seed:
    with app_session() as session:
        alice = Editor(name="alice")
        bob = Editor(name="bob")
        english = Language(name="English", iso_code_1="en", iso_code_3="eng")
        german = Language(name="German", iso_code_1="de", iso_code_3="deu")
        novel = WorkType(label="Novel")
        poem = WorkType(label="Poem")
        wikidata = IdentifierType(label="Wikidata ID", entity_type="Work", validation_regex=r"Q\d+")
        isbn = IdentifierType(label="ISBN-13", entity_type="Edition", validation_regex=r"97[89]\d{10}")
        viaf = IdentifierType(label="VIAF", entity_type="Author", validation_regex=r"\d+")
        session.add_all([alice, bob, english, german, novel, poem, wikidata, isbn, viaf])
        session.flush()
        return Seed(
            editor_id=alice.id,
            other_editor_id=bob.id,
            english_id=english.id,
            german_id=german.id,
            novel_id=novel.id,
            poem_id=poem.id,
            wikidata_id=wikidata.id,
            isbn_id=isbn.id,
            viaf_id=viaf.id,
        )


@pytest.fixture
def work_payload(seed) -> Callable[..., Dict[str, Any]]:
    """Build a valid Work submission payload; keyword overrides replace keys."""

    def _build(name: str = "Dune", **overrides: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "aliases": [
                {
                    "name": name,
                    "sortName": name,
                    "language": seed.english_id,
                    "primary": True,
                    "default": True,
                },
            ],
            "workTypeId": seed.novel_id,
            "disambiguation": "novel by Frank Herbert",
            "annotation": "First published in 1965.",
            "identifiers": [{"value": "Q190192", "type": seed.wikidata_id}],
            "languages": [seed.english_id],
            "note": "initial import",
        }
        payload.update(overrides)
        return payload

    return _build
