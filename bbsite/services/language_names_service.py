"""Language name display helpers.

Language rows store an English name plus ISO 639 codes. For display we
prefer Babel/CLDR localized names and fall back to the stored name.

This is read-only and safe to call during request handling.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from babel import Locale, UnknownLocaleError

from bbsite.utils.logging import get_logger

LOG = get_logger("language_names_service")

UNKNOWN_TRANSLATION = "Unknown"


def _normalize_locale(locale: object) -> str:
    raw = str(locale or "").strip()
    if not raw:
        return ""
    return raw.replace("-", "_")


def _babel_language_name(locale_str: str, codes: Iterable[Optional[str]]) -> Optional[str]:
    try:
        loc = Locale.parse(locale_str or "en")
    except (UnknownLocaleError, ValueError):
        LOG.debug("Unknown locale %r; using stored language names", locale_str)
        return None
    for code in codes:
        if not code:
            continue
        name = loc.languages.get(code.strip().lower())
        if name:
            return str(name)
    return None


def _capitalize_display_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        return name
    return name[0].upper() + name[1:]


def get_language_name(locale: object, language: Mapping[str, Any]) -> str:
    """Return the display name of a language row for `locale`."""
    locale_str = _normalize_locale(locale)
    babel_name = _babel_language_name(
        locale_str,
        (language.get("iso_code_1"), language.get("iso_code_3")),
    )
    if babel_name:
        return _capitalize_display_name(babel_name)
    return language.get("name") or UNKNOWN_TRANSLATION


def localize_languages(locale: object, languages: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Copy language rows with `name` replaced by its localized form, sorted by it."""
    localized = []
    for language in languages:
        row = dict(language)
        row["name"] = get_language_name(locale, language)
        localized.append(row)
    localized.sort(key=lambda row: (row["name"].casefold(), row.get("id") or 0))
    return localized


__all__ = ["get_language_name", "localize_languages", "UNKNOWN_TRANSLATION"]
