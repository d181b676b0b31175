"""Props handed to the entity form wizard.

The wizard needs reference lists (languages, type vocabulary, identifier
types), the entity being edited if any, where to post the result and a page
title.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from flask_babel import get_locale, gettext as _, lazy_gettext

from bbsite.db.repositories import entities_repo
from bbsite.services.entity_submission_service import EntityNotFoundError, type_id_key
from bbsite.services.language_names_service import localize_languages
from bbsite.utils.entities import (
    create_entity_page_title,
    filter_identifier_types_by_entity,
    filter_identifier_types_by_entity_type,
    get_entity_model_by_type,
    kebab_case,
)

ENTITY_LABELS = {
    "Author": lazy_gettext("Author"),
    "Edition": lazy_gettext("Edition"),
    "EditionGroup": lazy_gettext("Edition Group"),
    "Publisher": lazy_gettext("Publisher"),
    "Work": lazy_gettext("Work"),
}


def _current_locale() -> str:
    locale = get_locale()
    return str(locale) if locale is not None else "en"


def submission_url(entity_type: str, bbid: Optional[str] = None) -> str:
    slug = kebab_case(entity_type)
    if bbid:
        return f"/{slug}/{bbid}/edit/handler"
    return f"/{slug}/create/handler"


def _base_props(entity_type: str, locale: Optional[str]) -> Dict[str, Any]:
    get_entity_model_by_type(entity_type)
    return {
        "entity_type": entity_type,
        "type_field": type_id_key(entity_type) if has_type_vocabulary(entity_type) else None,
        "languages": localize_languages(locale or _current_locale(), entities_repo.list_languages()),
        "types": entities_repo.list_type_terms(entity_type),
    }


def has_type_vocabulary(entity_type: str) -> bool:
    return entities_repo.get_type_term_model(entity_type) is not None


def build_create_props(entity_type: str, locale: Optional[str] = None) -> Dict[str, Any]:
    props = _base_props(entity_type, locale)
    label = str(ENTITY_LABELS[entity_type])
    props.update({
        "entity": None,
        "identifier_types": filter_identifier_types_by_entity_type(
            entities_repo.list_identifier_types(), entity_type
        ),
        "submission_url": submission_url(entity_type),
        "title": _("Add %(type)s", type=label),
    })
    return props


def build_edit_props(entity_type: str, bbid: str, locale: Optional[str] = None) -> Dict[str, Any]:
    snapshot = entities_repo.get_entity_snapshot(entity_type, bbid)
    if snapshot is None:
        raise EntityNotFoundError("entity_missing")
    props = _base_props(entity_type, locale)
    label = str(ENTITY_LABELS[entity_type])
    props.update({
        "entity": snapshot,
        "identifier_types": filter_identifier_types_by_entity(
            entities_repo.list_identifier_types(), snapshot
        ),
        "submission_url": submission_url(entity_type, bbid),
        "title": create_entity_page_title(
            snapshot,
            _("Edit %(type)s", type=label),
            lambda values: _("Edit %(type)s “%(name)s”", type=label, name=values["name"]),
        ),
    })
    return props


__all__ = [
    "ENTITY_LABELS",
    "submission_url",
    "has_type_vocabulary",
    "build_create_props",
    "build_edit_props",
]
