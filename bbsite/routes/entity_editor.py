"""Entity create/edit endpoints.

Routes:
    GET  /<type-slug>/create               -> wizard props for a new entity
    POST /<type-slug>/create/handler       -> create entity from wizard payload
    GET  /<type-slug>/<bbid>/edit          -> wizard props prefilled with entity
    POST /<type-slug>/<bbid>/edit/handler  -> append revision to entity

Handlers answer 401 with an empty body when no editor is signed in; the
wizard treats a body without ``entity`` as a login redirect.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Blueprint, jsonify, request
from flask_babel import lazy_gettext

from bbsite.services import (
    EditorNotFoundError,
    EntityNotFoundError,
    SubmissionValidationError,
    create_entity,
    edit_entity,
    form_props_service,
)
from bbsite.utils import (
    UnrecognizedEntityTypeError,
    entity_type_from_slug,
    get_current_editor_id,
)
from bbsite.utils.logging import get_logger

bp = Blueprint("entity_editor", __name__)
LOG = get_logger("bbsite.routes.entity_editor")

_ERROR_MESSAGES = {
    "unknown_entity_type": lazy_gettext("This entity type does not exist."),
    "entity_missing": lazy_gettext("Entity could not be found."),
    "invalid_payload": lazy_gettext("Submission payload is not valid."),
    "invalid_aliases": lazy_gettext("Aliases are not valid."),
    "alias_incomplete": lazy_gettext("Every alias needs a name and a sort name."),
    "aliases_required": lazy_gettext("At least one alias is required."),
    "default_alias_required": lazy_gettext("Select a default alias."),
    "multiple_default_aliases": lazy_gettext("Only one alias can be the default."),
    "invalid_identifiers": lazy_gettext("Identifiers are not valid."),
    "invalid_identifier_type": lazy_gettext("Identifier type is not valid."),
    "invalid_language": lazy_gettext("Language is not valid."),
    "invalid_type_id": lazy_gettext("Type is not valid."),
    "invalid_text": lazy_gettext("Text fields must be strings."),
    "unknown_type_id": lazy_gettext("Selected type does not exist."),
    "unknown_language": lazy_gettext("Selected language does not exist."),
    "unknown_identifier_type": lazy_gettext("Identifier type does not exist."),
    "identifier_type_not_allowed": lazy_gettext("Identifier type does not apply to this entity."),
    "invalid_identifier_value": lazy_gettext("Identifier value does not match its type."),
}


def _json_error(code: str, status: int = 400, *, message: Optional[str] = None):
    payload: Dict[str, Any] = {"error": code}
    final_message = message or _ERROR_MESSAGES.get(code)
    if final_message:
        payload["message"] = str(final_message)
    return jsonify(payload), status


def _resolve_type(slug: str) -> Optional[str]:
    try:
        return entity_type_from_slug(slug)
    except UnrecognizedEntityTypeError:
        return None


def _not_signed_in():
    return jsonify({}), 401


@bp.route("/<slug>/create", methods=["GET"])
def create_props(slug: str):
    entity_type = _resolve_type(slug)
    if entity_type is None:
        return _json_error("unknown_entity_type", 404)
    return jsonify(form_props_service.build_create_props(entity_type))


@bp.route("/<slug>/<bbid>/edit", methods=["GET"])
def edit_props(slug: str, bbid: str):
    entity_type = _resolve_type(slug)
    if entity_type is None:
        return _json_error("unknown_entity_type", 404)
    try:
        props = form_props_service.build_edit_props(entity_type, bbid)
    except EntityNotFoundError:
        return _json_error("entity_missing", 404)
    return jsonify(props)


def _handle_submission(entity_type: str, bbid: Optional[str]):
    editor_id = get_current_editor_id()
    if editor_id is None:
        return _not_signed_in()
    payload = request.get_json(silent=True)
    try:
        if bbid is None:
            result = create_entity(entity_type, payload, editor_id=editor_id)
        else:
            result = edit_entity(entity_type, bbid, payload, editor_id=editor_id)
    except SubmissionValidationError as exc:
        LOG.debug("Rejected %s submission: %s", entity_type, exc)
        return _json_error(str(exc), 400)
    except EntityNotFoundError:
        return _json_error("entity_missing", 404)
    except EditorNotFoundError:
        LOG.warning("Session editor %s no longer exists", editor_id)
        return _not_signed_in()
    return jsonify({"entity": result["entity"]})


@bp.route("/<slug>/create/handler", methods=["POST"])
def create_handler(slug: str):
    entity_type = _resolve_type(slug)
    if entity_type is None:
        return _json_error("unknown_entity_type", 404)
    return _handle_submission(entity_type, None)


@bp.route("/<slug>/<bbid>/edit/handler", methods=["POST"])
def edit_handler(slug: str, bbid: str):
    entity_type = _resolve_type(slug)
    if entity_type is None:
        return _json_error("unknown_entity_type", 404)
    return _handle_submission(entity_type, bbid)


def register_entity_editor(app: Any) -> None:
    if getattr(app, "_entity_editor_bp", None):
        return
    app.register_blueprint(bp)
    setattr(app, "_entity_editor_bp", bp)
    LOG.debug("entity editor blueprint registered")


__all__ = ["register_entity_editor", "bp"]
