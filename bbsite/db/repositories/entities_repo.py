"""Repository helpers for entities and the reference data entity forms need."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import joinedload, selectinload

from bbsite.db import app_session
from bbsite.db.models import (
    AliasSet,
    AuthorType,
    EditionGroupType,
    EntityData,
    Identifier,
    IdentifierSet,
    IdentifierType,
    Language,
    PublisherType,
    TYPE_TERM_ATTRIBUTES,
    WorkType,
)
from bbsite.utils.entities import (
    get_additional_relations,
    get_entity_model_by_type,
    get_revision_model_by_type,
)

_TYPE_TERM_MODELS = {
    "Author": AuthorType,
    "EditionGroup": EditionGroupType,
    "Publisher": PublisherType,
    "Work": WorkType,
}


def get_type_term_model(entity_type: str) -> Optional[type]:
    """Vocabulary model for the entity type, None for types without one (Edition)."""
    get_entity_model_by_type(entity_type)
    return _TYPE_TERM_MODELS.get(entity_type)


def _data_options(entity_type: str) -> list:
    options = [
        joinedload(EntityData.alias_set).options(
            joinedload(AliasSet.default_alias),
            selectinload(AliasSet.aliases),
        ),
        selectinload(EntityData.identifier_set)
        .selectinload(IdentifierSet.identifiers)
        .joinedload(Identifier.type),
        selectinload(EntityData.languages),
        joinedload(EntityData.annotation),
    ]
    for name in get_additional_relations(entity_type):
        if name == "identifier_set":
            continue
        options.append(joinedload(getattr(EntityData, name)))
    return options


def _optional_dict(value) -> Optional[Dict[str, Any]]:
    return value.as_dict() if value is not None else None


def get_entity_snapshot(entity_type: str, bbid: str) -> Optional[Dict[str, Any]]:
    """Prefill data for editing: the entity as of its master revision."""
    entity_model = get_entity_model_by_type(entity_type)
    revision_model = get_revision_model_by_type(entity_type)
    with app_session() as session:
        entity = session.get(entity_model, bbid)
        if entity is None or entity.master_revision_id is None:
            return None
        row = (
            session.query(revision_model)
            .filter(
                revision_model.bbid == bbid,
                revision_model.revision_id == entity.master_revision_id,
            )
            .one_or_none()
        )
        if row is None:
            return None
        data = (
            session.query(EntityData)
            .options(*_data_options(entity_type))
            .filter(EntityData.id == row.data_id)
            .one_or_none()
        )
        snapshot: Dict[str, Any] = entity.as_dict()
        if data is None:
            return snapshot
        alias_set = data.alias_set
        snapshot.update({
            "data_id": data.id,
            "default_alias": _optional_dict(alias_set.default_alias if alias_set else None),
            "alias_set": _optional_dict(alias_set),
            "identifier_set": _optional_dict(data.identifier_set),
            "disambiguation": _optional_dict(data.disambiguation),
            "annotation": _optional_dict(data.annotation),
            "languages": [language.as_dict() for language in data.languages],
        })
        term_attr = TYPE_TERM_ATTRIBUTES.get(entity_type)
        if term_attr:
            snapshot[term_attr] = _optional_dict(data.type_term(entity_type))
        return snapshot


def list_languages() -> List[Dict[str, Any]]:
    with app_session() as session:
        rows = session.query(Language).order_by(Language.name, Language.id).all()
        return [row.as_dict() for row in rows]


def list_identifier_types() -> List[Dict[str, Any]]:
    with app_session() as session:
        rows = session.query(IdentifierType).order_by(IdentifierType.label, IdentifierType.id).all()
        return [row.as_dict() for row in rows]


def list_type_terms(entity_type: str) -> List[Dict[str, Any]]:
    model = get_type_term_model(entity_type)
    if model is None:
        return []
    with app_session() as session:
        rows = session.query(model).order_by(model.label).all()
        return [row.as_dict() for row in rows]


__all__ = [
    "get_type_term_model",
    "get_entity_snapshot",
    "list_languages",
    "list_identifier_types",
    "list_type_terms",
]
