"""Editor identity helpers.

Authentication lives outside this application; whatever signs the editor in
stores the editor id in the Flask session under ``editor_id``.
"""
from __future__ import annotations

from typing import Optional

from flask import session

SESSION_EDITOR_KEY = "editor_id"


def get_current_editor_id() -> Optional[int]:
    raw = session.get(SESSION_EDITOR_KEY)
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


__all__ = ["SESSION_EDITOR_KEY", "get_current_editor_id"]
