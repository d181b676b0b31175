"""Utility helpers.

Bridging import surface so callers can pull identity and entity helpers
from one place.
"""
from .identity import (
    SESSION_EDITOR_KEY,
    get_current_editor_id,
)
from .entities import (
    UnrecognizedEntityTypeError,
    create_entity_page_title,
    entity_type_from_slug,
    get_entity_link,
    template,
)

__all__ = [
    "SESSION_EDITOR_KEY",
    "get_current_editor_id",
    "UnrecognizedEntityTypeError",
    "create_entity_page_title",
    "entity_type_from_slug",
    "get_entity_link",
    "template",
]
