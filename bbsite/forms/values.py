"""Immutable values held by each entity form step.

Steps never mutate a value; edits produce a new value (``dataclasses.replace``)
which is handed to the wizard through ``on_value_changed``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class AliasRow:
    id: Optional[int] = None
    name: str = ""
    sort_name: str = ""
    language: Optional[int] = None
    primary: bool = False
    default: bool = False

    @property
    def is_blank(self) -> bool:
        return not self.name.strip() and not self.sort_name.strip()

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name.strip(),
            "sortName": self.sort_name.strip(),
            "language": self.language,
            "primary": self.primary,
            "default": self.default,
        }


@dataclass(frozen=True)
class AliasesValue:
    aliases: Tuple[AliasRow, ...] = ()

    def filled(self) -> Tuple[AliasRow, ...]:
        return tuple(row for row in self.aliases if not row.is_blank)


@dataclass(frozen=True)
class IdentifierRow:
    id: Optional[int] = None
    value: str = ""
    type: Optional[int] = None

    @property
    def is_blank(self) -> bool:
        return not self.value.strip()

    def to_payload(self) -> Dict[str, Any]:
        return {"id": self.id, "value": self.value.strip(), "type": self.type}


@dataclass(frozen=True)
class EntityDataValue:
    languages: Tuple[int, ...] = ()
    type_id: Optional[int] = None
    disambiguation: Optional[str] = None
    annotation: Optional[str] = None
    identifiers: Tuple[IdentifierRow, ...] = ()


@dataclass(frozen=True)
class RevisionNoteValue:
    note: str = ""


__all__ = [
    "AliasRow",
    "AliasesValue",
    "IdentifierRow",
    "EntityDataValue",
    "RevisionNoteValue",
]
