"""Entity helpers shared by routes, services and the form wizard.

Everything here is pure: no session access, no request context.
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from bbsite.db.models import (
    Author,
    AuthorRevision,
    Edition,
    EditionGroup,
    EditionGroupRevision,
    EditionRevision,
    Publisher,
    PublisherRevision,
    Work,
    WorkRevision,
)

_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")


class UnrecognizedEntityTypeError(ValueError):
    """Raised when an entity type name does not map to a model."""

    def __init__(self, entity_type: Any):
        self.entity_type = entity_type
        super().__init__(f"Unrecognized entity type: '{entity_type}'")


def _words(value: str) -> List[str]:
    return _WORD_RE.findall(value or "")


def kebab_case(value: str) -> str:
    return "-".join(word.lower() for word in _words(value))


def snake_case(value: str) -> str:
    return "_".join(word.lower() for word in _words(value))


def camel_case(value: str) -> str:
    words = [word.lower() for word in _words(value)]
    if not words:
        return ""
    return words[0] + "".join(word.capitalize() for word in words[1:])


def get_entity_link(entity: Mapping[str, Any]) -> str:
    """Return the site path for an entity: /<kebab-case type>/<bbid>."""
    return f"/{kebab_case(entity['type'])}/{entity['bbid']}"


def get_entity_models() -> Dict[str, type]:
    return {
        "Author": Author,
        "Edition": Edition,
        "EditionGroup": EditionGroup,
        "Publisher": Publisher,
        "Work": Work,
    }


def get_revision_models() -> List[type]:
    """Revision models in the order used to pick one when a revision touches several entities."""
    return [
        AuthorRevision,
        EditionGroupRevision,
        EditionRevision,
        PublisherRevision,
        WorkRevision,
    ]


def get_entity_model_by_type(entity_type: str) -> type:
    models = get_entity_models()
    if entity_type not in models:
        raise UnrecognizedEntityTypeError(entity_type)
    return models[entity_type]


def get_revision_model_by_type(entity_type: str) -> type:
    get_entity_model_by_type(entity_type)
    for model in get_revision_models():
        if model.__mapper__.polymorphic_identity == entity_type:
            return model
    raise UnrecognizedEntityTypeError(entity_type)


def entity_type_from_slug(slug: str) -> str:
    """Map a URL segment such as ``edition-group`` back to ``EditionGroup``."""
    for name in get_entity_models():
        if kebab_case(name) == slug:
            return name
    raise UnrecognizedEntityTypeError(slug)


def filter_identifier_types_by_entity_type(
    identifier_types: Iterable[Mapping[str, Any]],
    entity_type: str,
) -> List[Mapping[str, Any]]:
    return [t for t in identifier_types if t.get("entity_type") == entity_type]


def filter_identifier_types_by_entity(
    identifier_types: Iterable[Mapping[str, Any]],
    entity: Mapping[str, Any],
) -> List[Mapping[str, Any]]:
    """Identifier types usable on `entity`.

    Types for the entity's own type plus any type already present on the
    entity, so an identifier attached under another type stays editable.
    """
    identifier_set = entity.get("identifier_set") or {}
    identifiers = identifier_set.get("identifiers") or []
    if not identifiers:
        # Nothing foreign to keep around.
        return filter_identifier_types_by_entity_type(identifier_types, entity.get("type"))

    types_on_entity = set()
    for identifier in identifiers:
        identifier_type = identifier.get("type") or {}
        types_on_entity.add(identifier_type.get("id"))

    return [
        t for t in identifier_types
        if t.get("entity_type") == entity.get("type") or t.get("id") in types_on_entity
    ]


def template(strings: Sequence[str], *keys: Any) -> Callable[[Any], str]:
    """Build a formatter that interpolates ``values[key]`` between literal strings.

    ``template(["Hello, ", "!"], "name")({"name": "World"})`` gives
    ``"Hello, World!"``. Keys may be mapping keys or sequence indexes.
    """
    if len(strings) != len(keys) + 1:
        raise ValueError("template_strings_keys_mismatch")

    def _render(values: Any) -> str:
        result = [strings[0]]
        for i, key in enumerate(keys):
            result.append(str(values[key]))
            result.append(strings[i + 1])
        return "".join(result)

    return _render


def create_entity_page_title(
    entity: Optional[Mapping[str, Any]],
    title_for_unnamed: str,
    template_for_named: Callable[[Dict[str, str]], str],
) -> str:
    """Generate a page title for an entity.

    User-visible strings must not be built by concatenation since word order
    differs between languages; the caller passes a whole translated template
    that receives the name.
    """
    title = title_for_unnamed
    default_alias = (entity or {}).get("default_alias") or {}
    name = default_alias.get("name")
    if name:
        title = template_for_named({"name": name})
    return title


def get_date_before_days(days: int) -> datetime:
    return datetime.utcnow() - timedelta(days=days)


def get_additional_relations(entity_type: str) -> List[str]:
    """Extra EntityData relationships worth eager-loading for an entity type."""
    if entity_type == "Work":
        return ["disambiguation", "work_type"]
    if entity_type == "Edition":
        return ["disambiguation", "identifier_set"]
    return []


__all__ = [
    "UnrecognizedEntityTypeError",
    "kebab_case",
    "snake_case",
    "camel_case",
    "get_entity_link",
    "get_entity_models",
    "get_revision_models",
    "get_entity_model_by_type",
    "get_revision_model_by_type",
    "entity_type_from_slug",
    "filter_identifier_types_by_entity_type",
    "filter_identifier_types_by_entity",
    "template",
    "create_entity_page_title",
    "get_date_before_days",
    "get_additional_relations",
]
