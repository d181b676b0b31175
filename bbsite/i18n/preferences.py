"""Shared language preference helpers for UI switching."""
from __future__ import annotations

from typing import Optional

SESSION_LOCALE_KEY = "preferred_locale"
SUPPORTED_LANGUAGES = ("en", "de", "es", "fr", "it", "nl", "pt", "ru")


def normalize_language_choice(raw: Optional[str]) -> Optional[str]:
    """Normalize a user-provided language code to a supported value.

    Region subtags are dropped (``pt_BR`` and ``pt-br`` both give ``pt``).
    """
    if not isinstance(raw, str):
        return None
    primary = raw.strip().replace("_", "-").split("-", 1)[0].lower()
    return primary if primary in SUPPORTED_LANGUAGES else None


__all__ = [
    "SESSION_LOCALE_KEY",
    "SUPPORTED_LANGUAGES",
    "normalize_language_choice",
]
