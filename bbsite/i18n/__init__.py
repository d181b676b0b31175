"""Flask-Babel setup: locale selection and translation directories."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from flask import has_request_context, request, session
from flask_babel import Babel, get_babel

from bbsite import config as app_config
from bbsite.i18n.preferences import (
    SESSION_LOCALE_KEY,
    SUPPORTED_LANGUAGES,
    normalize_language_choice,
)
from bbsite.utils.logging import get_logger

LOG = get_logger("bbsite.i18n")


def select_locale() -> Optional[str]:
    """Session preference first, then the browser's Accept-Language header."""
    if not has_request_context():
        return None
    preferred = normalize_language_choice(session.get(SESSION_LOCALE_KEY))
    if preferred:
        return preferred
    return request.accept_languages.best_match(SUPPORTED_LANGUAGES)


def init_babel(app) -> Babel:
    existing = app.extensions.get("babel")
    if existing is not None:
        return existing.instance
    app.config.setdefault("BABEL_DEFAULT_LOCALE", "en")
    babel = Babel(app, locale_selector=select_locale)
    LOG.debug("Flask-Babel initialized")
    return babel


def _normalize_paths(paths: Iterable[Path | str]) -> List[str]:
    seen: List[str] = []
    for candidate in paths:
        path = Path(candidate).resolve()
        if not path.is_dir():
            LOG.debug("Translation directory missing; skipping: %s", path)
            continue
        as_str = str(path)
        if as_str not in seen:
            seen.append(as_str)
    return seen


def configure_translations(app, extra_roots: Iterable[Path | str] | None = None) -> List[str]:
    """Register configured translation directories in Babel's search path.

    Flask-Babel looks directories up in order, so configured ones go first
    and any pre-existing directories are kept after them. Returns the
    merged list.
    """
    babel_cfg = get_babel(app)

    candidates: List[Path | str] = list(app_config.translation_dirs())
    if extra_roots:
        candidates.extend(extra_roots)

    desired = _normalize_paths(candidates)
    existing = list(getattr(babel_cfg, "translation_directories", []))

    merged: List[str] = []
    for directory in desired + existing:
        if directory not in merged:
            merged.append(directory)

    if merged == existing:
        return merged

    babel_cfg.translation_directories = merged
    app.config["BABEL_TRANSLATION_DIRECTORIES"] = ";".join(merged)
    LOG.info("Registered %s custom translation directories", len(desired))
    return merged


__all__ = [
    "select_locale",
    "init_babel",
    "configure_translations",
]
