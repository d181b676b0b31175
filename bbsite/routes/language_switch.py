"""Language switch endpoint for editors and anonymous visitors."""
from __future__ import annotations

from flask import Blueprint, jsonify, request, session

from bbsite.i18n.preferences import SESSION_LOCALE_KEY, SUPPORTED_LANGUAGES, normalize_language_choice
from bbsite.utils.logging import get_logger

LOG = get_logger("bbsite.language_switch")

bp = Blueprint("language_switch", __name__)


@bp.route("/language/switch", methods=["POST", "GET"])
def switch_language():
    payload = request.get_json(silent=True) or {}
    raw_lang = payload.get("language") or request.values.get("language") or request.values.get("lang")
    normalized = normalize_language_choice(raw_lang)
    if not normalized:
        return jsonify({"error": "unsupported_language", "supported": list(SUPPORTED_LANGUAGES)}), 400

    session[SESSION_LOCALE_KEY] = normalized
    session.modified = True
    LOG.debug("Session language set to %s", normalized)

    target = request.values.get("next") or request.referrer or "/"
    return jsonify({"status": "ok", "language": normalized, "redirect": target})


def register_language_switch(app):
    if getattr(app, "_bbsite_language_switch", False):
        return
    app.register_blueprint(bp)
    setattr(app, "_bbsite_language_switch", True)
    LOG.debug("Language switch blueprint registered")


__all__ = ["register_language_switch", "bp"]
