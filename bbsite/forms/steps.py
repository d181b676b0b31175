"""Entity form steps.

Each step captures one category of entity fields. A step is stateless: it
knows how to derive its initial value from prefill data, whether a value is
acceptable and how the value contributes to the submission payload.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from flask_babel import lazy_gettext

from bbsite.db.models import TYPE_TERM_ATTRIBUTES

from .values import (
    AliasRow,
    AliasesValue,
    EntityDataValue,
    IdentifierRow,
    RevisionNoteValue,
)


def _get(mapping: Optional[Mapping[str, Any]], key: str) -> Any:
    if not isinstance(mapping, Mapping):
        return None
    return mapping.get(key)


class FormStep:
    step_id = ""
    label: Any = ""

    def initial_value(self, prefill: Optional[Mapping[str, Any]]) -> Any:
        raise NotImplementedError

    def is_valid(self, value: Any) -> bool:
        raise NotImplementedError

    def to_payload(self, value: Any) -> Dict[str, Any]:
        raise NotImplementedError


class AliasesStep(FormStep):
    step_id = "aliases"
    label = lazy_gettext("Aliases")

    def initial_value(self, prefill: Optional[Mapping[str, Any]]) -> AliasesValue:
        aliases = _get(_get(prefill, "alias_set"), "aliases") or []
        if not aliases:
            return AliasesValue(aliases=(AliasRow(default=True),))
        default_id = _get(_get(prefill, "default_alias"), "id")
        return AliasesValue(aliases=tuple(
            AliasRow(
                id=alias.get("id"),
                name=alias.get("name") or "",
                sort_name=alias.get("sort_name") or "",
                language=alias.get("language_id"),
                primary=bool(alias.get("primary")),
                default=alias.get("id") == default_id,
            )
            for alias in aliases
        ))

    def is_valid(self, value: AliasesValue) -> bool:
        rows = value.filled()
        if not rows:
            return False
        if any(not row.name.strip() or not row.sort_name.strip() for row in rows):
            return False
        return sum(1 for row in rows if row.default) == 1

    def to_payload(self, value: AliasesValue) -> Dict[str, Any]:
        return {"aliases": [row.to_payload() for row in value.filled()]}


class EntityDataStep(FormStep):
    """Languages, type, disambiguation, annotation and identifiers."""

    step_id = "data"
    label = lazy_gettext("Data")

    def __init__(
        self,
        entity_type: str,
        type_field: Optional[str] = None,
        identifier_types: Iterable[Mapping[str, Any]] = (),
    ):
        self.entity_type = entity_type
        self.type_field = type_field
        self.identifier_types: Dict[Any, Mapping[str, Any]] = {
            t.get("id"): t for t in identifier_types
        }

    def initial_value(self, prefill: Optional[Mapping[str, Any]]) -> EntityDataValue:
        if not isinstance(prefill, Mapping):
            return EntityDataValue()
        term_attr = TYPE_TERM_ATTRIBUTES.get(self.entity_type)
        identifiers = _get(prefill.get("identifier_set"), "identifiers") or []
        return EntityDataValue(
            languages=tuple(language.get("id") for language in prefill.get("languages") or []),
            type_id=_get(prefill.get(term_attr), "id") if term_attr else None,
            disambiguation=_get(prefill.get("disambiguation"), "comment"),
            annotation=_get(prefill.get("annotation"), "content"),
            identifiers=tuple(
                IdentifierRow(
                    id=identifier.get("id"),
                    value=identifier.get("value") or "",
                    type=_get(identifier.get("type"), "id"),
                )
                for identifier in identifiers
            ),
        )

    def identifier_is_valid(self, row: IdentifierRow) -> bool:
        identifier_type = self.identifier_types.get(row.type)
        if identifier_type is None:
            return False
        pattern = identifier_type.get("validation_regex")
        if not pattern:
            return True
        return re.fullmatch(pattern, row.value.strip()) is not None

    def is_valid(self, value: EntityDataValue) -> bool:
        return all(self.identifier_is_valid(row) for row in value.identifiers if not row.is_blank)

    def to_payload(self, value: EntityDataValue) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "languages": list(value.languages),
            "disambiguation": value.disambiguation,
            "annotation": value.annotation,
            "identifiers": [row.to_payload() for row in value.identifiers if not row.is_blank],
        }
        if self.type_field:
            payload[self.type_field] = value.type_id
        return payload


class RevisionNoteStep(FormStep):
    step_id = "note"
    label = lazy_gettext("Revision Note")

    def initial_value(self, prefill: Optional[Mapping[str, Any]]) -> RevisionNoteValue:
        return RevisionNoteValue()

    def is_valid(self, value: RevisionNoteValue) -> bool:
        return True

    def to_payload(self, value: RevisionNoteValue) -> Dict[str, Any]:
        return {"note": value.note}


def default_steps(
    entity_type: str,
    type_field: Optional[str] = None,
    identifier_types: Iterable[Mapping[str, Any]] = (),
) -> List[FormStep]:
    return [
        AliasesStep(),
        EntityDataStep(entity_type, type_field, identifier_types),
        RevisionNoteStep(),
    ]


__all__ = [
    "FormStep",
    "AliasesStep",
    "EntityDataStep",
    "RevisionNoteStep",
    "default_steps",
]
