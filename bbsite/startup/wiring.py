"""Application initialization / wiring.

Orchestrates: DB init, Babel, translation paths, route registration.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import Flask

from bbsite.config import APP_NAME, secret_key, summarize_runtime_config
from bbsite.db import init_engine_once
from bbsite.i18n import configure_translations, init_babel
from bbsite.routes.inject import register_all as register_routes
from bbsite.utils.logging import get_logger

LOG = get_logger("bbsite.startup")


def init_app(app: Any) -> None:
    LOG.debug("init_app starting")
    init_engine_once()
    LOG.debug("DB engine initialized")
    init_babel(app)
    configure_translations(app)
    register_routes(app)
    LOG.info("App startup wiring complete: %s", summarize_runtime_config())


def create_app(config_overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(APP_NAME)
    app.config["SECRET_KEY"] = secret_key()
    if config_overrides:
        app.config.update(config_overrides)
    # Revision payloads are assembled in display order.
    app.json.sort_keys = False
    init_app(app)
    return app


__all__ = ["init_app", "create_app"]
