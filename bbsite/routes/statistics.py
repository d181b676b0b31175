"""Top editors leaderboard (GET /statistics?days=&limit=)."""
from __future__ import annotations

from typing import Any, Optional

from flask import Blueprint, jsonify, request
from flask_babel import lazy_gettext

from bbsite.db.repositories.editors_repo import get_top_editors
from bbsite.utils.logging import get_logger

bp = Blueprint("statistics", __name__)
LOG = get_logger("bbsite.routes.statistics")

DEFAULT_LIMIT = 10
MAX_LIMIT = 100

_ERROR_MESSAGES = {
    "invalid_days": lazy_gettext("Days must be a positive whole number."),
    "invalid_limit": lazy_gettext("Limit must be a positive whole number."),
}


def _json_error(code: str, status: int = 400):
    payload = {"error": code}
    message = _ERROR_MESSAGES.get(code)
    if message:
        payload["message"] = str(message)
    return jsonify(payload), status


def _positive_int(raw: Optional[str]) -> Optional[int]:
    """None for a missing value; raises ValueError for anything not > 0."""
    if raw is None or raw == "":
        return None
    value = int(raw)
    if value <= 0:
        raise ValueError(raw)
    return value


@bp.route("/statistics", methods=["GET"])
def statistics():
    try:
        days = _positive_int(request.args.get("days"))
    except ValueError:
        return _json_error("invalid_days")
    try:
        limit = _positive_int(request.args.get("limit")) or DEFAULT_LIMIT
    except ValueError:
        return _json_error("invalid_limit")
    limit = min(limit, MAX_LIMIT)
    return jsonify({
        "days": days,
        "limit": limit,
        "top_editors": get_top_editors(limit=limit, days=days),
    })


def register_statistics(app: Any) -> None:
    if getattr(app, "_statistics_bp", None):
        return
    app.register_blueprint(bp)
    setattr(app, "_statistics_bp", bp)
    LOG.debug("statistics blueprint registered")


__all__ = ["register_statistics", "bp"]
