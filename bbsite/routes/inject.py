"""Route registration, called once from startup wiring."""
from __future__ import annotations

from typing import Any

from .entity_editor import register_entity_editor
from .health import register_health
from .language_switch import register_language_switch
from .revisions import register_revisions
from .statistics import register_statistics


def register_all(app: Any) -> None:
    register_language_switch(app)
    register_entity_editor(app)
    register_revisions(app)
    register_statistics(app)
    register_health(app)


__all__ = ["register_all"]
