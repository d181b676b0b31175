"""Persist entity form submissions as new revisions.

The submission payload is the JSON body posted by the entity form wizard:

    {aliases, <camelType>TypeId, disambiguation, annotation,
     identifiers, languages, note}

Every accepted submission appends one Revision plus a fresh data snapshot,
moves the entity's master pointer and bumps the editor's edit count, all in
a single transaction.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from sqlalchemy.orm import Session

from bbsite.db import app_session
from bbsite.db.models import (
    Alias,
    AliasSet,
    Annotation,
    Disambiguation,
    EntityData,
    Identifier,
    IdentifierSet,
    IdentifierType,
    Language,
    Note,
    Revision,
    TYPE_TERM_ATTRIBUTES,
)
from bbsite.db.repositories.editors_repo import (
    EditorNotFoundError,
    increment_editor_edit_count_by_id,
)
from bbsite.db.repositories.entities_repo import get_type_term_model
from bbsite.utils.entities import (
    camel_case,
    get_entity_model_by_type,
    get_revision_model_by_type,
)
from bbsite.utils.logging import get_logger

LOG = get_logger("entity_submission_service")


class SubmissionValidationError(ValueError):
    """Raised when a submission payload fails validation."""


class EntityNotFoundError(LookupError):
    """Raised when editing an entity that does not exist."""


@dataclass(frozen=True)
class AliasInput:
    name: str
    sort_name: str
    language_id: Optional[int] = None
    primary: bool = False
    default: bool = False


@dataclass(frozen=True)
class IdentifierInput:
    type_id: int
    value: str


@dataclass(frozen=True)
class SubmissionPayload:
    aliases: Tuple[AliasInput, ...]
    type_id: Optional[int] = None
    disambiguation: Optional[str] = None
    annotation: Optional[str] = None
    identifiers: Tuple[IdentifierInput, ...] = ()
    languages: Tuple[int, ...] = ()
    note: str = ""

    @property
    def default_alias(self) -> AliasInput:
        return next(alias for alias in self.aliases if alias.default)


def type_id_key(entity_type: str) -> str:
    """Payload key carrying the type vocabulary id, e.g. ``workTypeId``."""
    return f"{camel_case(entity_type)}TypeId"


def _parse_int(raw: Any, code: str) -> Optional[int]:
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise SubmissionValidationError(code)
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise SubmissionValidationError(code) from None


def _clean_text(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise SubmissionValidationError("invalid_text")
    cleaned = raw.strip()
    return cleaned or None


def _parse_aliases(raw: Any) -> Tuple[AliasInput, ...]:
    if raw is None:
        raw = []
    if not isinstance(raw, list):
        raise SubmissionValidationError("invalid_aliases")
    aliases: List[AliasInput] = []
    for item in raw:
        if not isinstance(item, Mapping):
            raise SubmissionValidationError("invalid_aliases")
        name = _clean_text(item.get("name"))
        sort_name = _clean_text(item.get("sortName"))
        if name is None and sort_name is None:
            continue  # blank row left in the form
        if name is None or sort_name is None:
            raise SubmissionValidationError("alias_incomplete")
        aliases.append(AliasInput(
            name=name,
            sort_name=sort_name,
            language_id=_parse_int(item.get("language"), "invalid_language"),
            primary=bool(item.get("primary")),
            default=bool(item.get("default")),
        ))
    if not aliases:
        raise SubmissionValidationError("aliases_required")
    defaults = sum(1 for alias in aliases if alias.default)
    if defaults == 0:
        raise SubmissionValidationError("default_alias_required")
    if defaults > 1:
        raise SubmissionValidationError("multiple_default_aliases")
    return tuple(aliases)


def _parse_identifiers(raw: Any) -> Tuple[IdentifierInput, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise SubmissionValidationError("invalid_identifiers")
    identifiers: List[IdentifierInput] = []
    for item in raw:
        if not isinstance(item, Mapping):
            raise SubmissionValidationError("invalid_identifiers")
        value = _clean_text(item.get("value"))
        if value is None:
            continue
        type_id = _parse_int(item.get("type"), "invalid_identifier_type")
        if type_id is None:
            raise SubmissionValidationError("invalid_identifier_type")
        identifiers.append(IdentifierInput(type_id=type_id, value=value))
    return tuple(identifiers)


def _parse_languages(raw: Any) -> Tuple[int, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise SubmissionValidationError("invalid_language")
    languages: List[int] = []
    for item in raw:
        language_id = _parse_int(item, "invalid_language")
        if language_id is not None and language_id not in languages:
            languages.append(language_id)
    return tuple(languages)


def parse_payload(entity_type: str, payload: Any) -> SubmissionPayload:
    get_entity_model_by_type(entity_type)
    if not isinstance(payload, Mapping):
        raise SubmissionValidationError("invalid_payload")
    type_id = None
    if get_type_term_model(entity_type) is not None:
        type_id = _parse_int(payload.get(type_id_key(entity_type)), "invalid_type_id")
    return SubmissionPayload(
        aliases=_parse_aliases(payload.get("aliases")),
        type_id=type_id,
        disambiguation=_clean_text(payload.get("disambiguation")),
        annotation=_clean_text(payload.get("annotation")),
        identifiers=_parse_identifiers(payload.get("identifiers")),
        languages=_parse_languages(payload.get("languages")),
        note=_clean_text(payload.get("note")) or "",
    )


@dataclass
class _References:
    type_term: Any = None
    languages: Dict[int, Language] = field(default_factory=dict)
    identifier_types: Dict[int, IdentifierType] = field(default_factory=dict)


def _load_references(
    session: Session,
    entity_type: str,
    parsed: SubmissionPayload,
    existing_type_ids: Set[int],
) -> _References:
    refs = _References()
    if parsed.type_id is not None:
        model = get_type_term_model(entity_type)
        refs.type_term = session.get(model, parsed.type_id) if model is not None else None
        if refs.type_term is None:
            raise SubmissionValidationError("unknown_type_id")

    wanted_languages = set(parsed.languages)
    wanted_languages.update(a.language_id for a in parsed.aliases if a.language_id is not None)
    for language_id in sorted(wanted_languages):
        language = session.get(Language, language_id)
        if language is None:
            raise SubmissionValidationError("unknown_language")
        refs.languages[language_id] = language

    for identifier in parsed.identifiers:
        identifier_type = refs.identifier_types.get(identifier.type_id)
        if identifier_type is None:
            identifier_type = session.get(IdentifierType, identifier.type_id)
            if identifier_type is None:
                raise SubmissionValidationError("unknown_identifier_type")
            refs.identifier_types[identifier.type_id] = identifier_type
        if identifier_type.entity_type != entity_type and identifier_type.id not in existing_type_ids:
            raise SubmissionValidationError("identifier_type_not_allowed")
        if not identifier_type.matches(identifier.value):
            raise SubmissionValidationError("invalid_identifier_value")
    return refs


def _existing_identifier_type_ids(data: Optional[EntityData]) -> Set[int]:
    if data is None or data.identifier_set is None:
        return set()
    return {identifier.type_id for identifier in data.identifier_set.identifiers}


def _build_data(
    entity_type: str,
    parsed: SubmissionPayload,
    refs: _References,
) -> Tuple[EntityData, Alias, Optional[Annotation]]:
    aliases = [
        Alias(
            name=alias.name,
            sort_name=alias.sort_name,
            language=refs.languages.get(alias.language_id) if alias.language_id is not None else None,
            primary=alias.primary,
        )
        for alias in parsed.aliases
    ]
    default_alias = next(row for row, alias in zip(aliases, parsed.aliases) if alias.default)
    alias_set = AliasSet(aliases=aliases, default_alias=default_alias)

    identifier_set = None
    if parsed.identifiers:
        identifier_set = IdentifierSet(identifiers=[
            Identifier(type=refs.identifier_types[item.type_id], value=item.value)
            for item in parsed.identifiers
        ])

    annotation = Annotation(content=parsed.annotation) if parsed.annotation else None
    data = EntityData(
        alias_set=alias_set,
        identifier_set=identifier_set,
        disambiguation=Disambiguation(comment=parsed.disambiguation) if parsed.disambiguation else None,
        annotation=annotation,
        languages=[refs.languages[language_id] for language_id in parsed.languages],
    )
    term_attr = TYPE_TERM_ATTRIBUTES.get(entity_type)
    if term_attr and refs.type_term is not None:
        setattr(data, term_attr, refs.type_term)
    return data, default_alias, annotation


def _write_revision(
    session: Session,
    entity_type: str,
    entity,
    parsed: SubmissionPayload,
    editor_id: int,
    existing_type_ids: Set[int],
) -> Dict[str, Any]:
    refs = _load_references(session, entity_type, parsed, existing_type_ids)
    editor = increment_editor_edit_count_by_id(session, editor_id)

    revision = Revision(author=editor)
    if entity.master_revision is not None:
        revision.parents.append(entity.master_revision)
    session.add(revision)
    session.flush()

    data, default_alias, annotation = _build_data(entity_type, parsed, refs)
    if annotation is not None:
        annotation.last_revision_id = revision.id

    revision_model = get_revision_model_by_type(entity_type)
    session.add(revision_model(revision=revision, entity=entity, data=data))
    entity.master_revision = revision
    if parsed.note:
        session.add(Note(revision=revision, author_id=editor.id, content=parsed.note))
    session.flush()

    entity_payload = entity.as_dict()
    entity_payload["default_alias"] = default_alias.as_dict()
    return {"entity": entity_payload, "revision_id": revision.id}


def create_entity(entity_type: str, payload: Any, *, editor_id: int) -> Dict[str, Any]:
    """Create a new entity of `entity_type` from a wizard payload."""
    entity_model = get_entity_model_by_type(entity_type)
    parsed = parse_payload(entity_type, payload)
    with app_session() as session:
        entity = entity_model()
        session.add(entity)
        result = _write_revision(session, entity_type, entity, parsed, editor_id, set())
    LOG.info(
        "Created %s bbid=%s revision=%s editor=%s",
        entity_type,
        result["entity"]["bbid"],
        result["revision_id"],
        editor_id,
    )
    return result


def edit_entity(entity_type: str, bbid: str, payload: Any, *, editor_id: int) -> Dict[str, Any]:
    """Append a revision to an existing entity from a wizard payload."""
    entity_model = get_entity_model_by_type(entity_type)
    parsed = parse_payload(entity_type, payload)
    with app_session() as session:
        entity = session.get(entity_model, bbid)
        if entity is None:
            raise EntityNotFoundError("entity_missing")
        master_row = entity.master_entity_revision()
        existing = _existing_identifier_type_ids(master_row.data if master_row else None)
        result = _write_revision(session, entity_type, entity, parsed, editor_id, existing)
    LOG.info(
        "Edited %s bbid=%s revision=%s editor=%s",
        entity_type,
        bbid,
        result["revision_id"],
        editor_id,
    )
    return result


__all__ = [
    "SubmissionValidationError",
    "EntityNotFoundError",
    "EditorNotFoundError",
    "AliasInput",
    "IdentifierInput",
    "SubmissionPayload",
    "type_id_key",
    "parse_payload",
    "create_entity",
    "edit_entity",
]
