"""Service exports."""

from .entity_submission_service import (
    create_entity,
    edit_entity,
    parse_payload,
    EditorNotFoundError,
    EntityNotFoundError,
    SubmissionValidationError,
)
from .revisions_service import list_revisions, PagingError
from . import form_props_service, language_names_service

__all__ = [
    "create_entity",
    "edit_entity",
    "parse_payload",
    "EditorNotFoundError",
    "EntityNotFoundError",
    "SubmissionValidationError",
    "list_revisions",
    "PagingError",
    "form_props_service",
    "language_names_service",
]
