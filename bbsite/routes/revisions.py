"""Revision history listing (GET /revisions?from=&size=)."""
from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request
from flask_babel import lazy_gettext

from bbsite.services import PagingError, list_revisions
from bbsite.utils.logging import get_logger

bp = Blueprint("revisions", __name__)
LOG = get_logger("bbsite.routes.revisions")

_ERROR_MESSAGES = {
    "invalid_from": lazy_gettext("Offset must be a non-negative whole number."),
    "invalid_size": lazy_gettext("Page size must be a positive whole number."),
}


def _json_error(code: str, status: int = 400):
    payload = {"error": code}
    message = _ERROR_MESSAGES.get(code)
    if message:
        payload["message"] = str(message)
    return jsonify(payload), status


@bp.route("/revisions", methods=["GET"])
def revisions_list():
    try:
        page = list_revisions(request.args.get("from"), request.args.get("size"))
    except PagingError as exc:
        return _json_error(str(exc), 400)
    return jsonify(page)


def register_revisions(app: Any) -> None:
    if getattr(app, "_revisions_bp", None):
        return
    app.register_blueprint(bp)
    setattr(app, "_revisions_bp", bp)
    LOG.debug("revisions blueprint registered")


__all__ = ["register_revisions", "bp"]
