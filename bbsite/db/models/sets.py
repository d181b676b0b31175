"""ORM models for the versioned building blocks of entity data.

Aliases and identifiers are grouped into sets; a new set is written whenever
an edit changes its members so older revisions keep pointing at the rows
they were created with.
"""
from __future__ import annotations

import re

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import relationship

from .base import Base


class Language(Base):
    __tablename__ = "language"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    iso_code_1 = Column(String(2), nullable=True)
    iso_code_3 = Column(String(3), nullable=True, index=True)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "iso_code_1": self.iso_code_1,
            "iso_code_3": self.iso_code_3,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Language id={self.id} name={self.name}>"


alias_set__alias = Table(
    "alias_set__alias",
    Base.metadata,
    Column("set_id", Integer, ForeignKey("alias_set.id"), primary_key=True),
    Column("alias_id", Integer, ForeignKey("alias.id"), primary_key=True),
)


class Alias(Base):
    __tablename__ = "alias"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    sort_name = Column(Text, nullable=False)
    language_id = Column(Integer, ForeignKey("language.id"), nullable=True)
    primary = Column(Boolean, nullable=False, default=False)

    language = relationship("Language")

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "sort_name": self.sort_name,
            "language_id": self.language_id,
            "primary": bool(self.primary),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Alias id={self.id} name={self.name!r}>"


class AliasSet(Base):
    __tablename__ = "alias_set"

    id = Column(Integer, primary_key=True, autoincrement=True)
    default_alias_id = Column(Integer, ForeignKey("alias.id"), nullable=True)

    default_alias = relationship("Alias", foreign_keys=[default_alias_id])
    aliases = relationship("Alias", secondary=alias_set__alias, order_by="Alias.id")

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "default_alias_id": self.default_alias_id,
            "aliases": [alias.as_dict() for alias in self.aliases],
        }


class IdentifierType(Base):
    """External identifier scheme (ISBN, VIAF, Wikidata ...) for one entity type."""

    __tablename__ = "identifier_type"

    id = Column(Integer, primary_key=True, autoincrement=True)
    label = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    entity_type = Column(String(32), nullable=False, index=True)
    validation_regex = Column(Text, nullable=True)

    def matches(self, value: str) -> bool:
        if not self.validation_regex:
            return True
        return re.fullmatch(self.validation_regex, value or "") is not None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "entity_type": self.entity_type,
            "validation_regex": self.validation_regex,
        }


identifier_set__identifier = Table(
    "identifier_set__identifier",
    Base.metadata,
    Column("set_id", Integer, ForeignKey("identifier_set.id"), primary_key=True),
    Column("identifier_id", Integer, ForeignKey("identifier.id"), primary_key=True),
)


class Identifier(Base):
    __tablename__ = "identifier"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type_id = Column(Integer, ForeignKey("identifier_type.id"), nullable=False)
    value = Column(Text, nullable=False)

    type = relationship("IdentifierType")

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "value": self.value,
            "type": self.type.as_dict() if self.type else None,
        }


class IdentifierSet(Base):
    __tablename__ = "identifier_set"

    id = Column(Integer, primary_key=True, autoincrement=True)

    identifiers = relationship(
        "Identifier", secondary=identifier_set__identifier, order_by="Identifier.id"
    )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "identifiers": [identifier.as_dict() for identifier in self.identifiers],
        }


class Disambiguation(Base):
    __tablename__ = "disambiguation"

    id = Column(Integer, primary_key=True, autoincrement=True)
    comment = Column(Text, nullable=False, default="")

    def as_dict(self) -> dict:
        return {"id": self.id, "comment": self.comment}


class Annotation(Base):
    __tablename__ = "annotation"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False, default="")
    last_revision_id = Column(Integer, ForeignKey("revision.id"), nullable=True)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "last_revision_id": self.last_revision_id,
        }


class _TypeTermMixin:
    id = Column(Integer, primary_key=True, autoincrement=True)
    label = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)

    def as_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "description": self.description}


class AuthorType(_TypeTermMixin, Base):
    __tablename__ = "author_type"


class EditionGroupType(_TypeTermMixin, Base):
    __tablename__ = "edition_group_type"


class PublisherType(_TypeTermMixin, Base):
    __tablename__ = "publisher_type"


class WorkType(_TypeTermMixin, Base):
    __tablename__ = "work_type"


__all__ = [
    "Language",
    "Alias",
    "AliasSet",
    "IdentifierType",
    "Identifier",
    "IdentifierSet",
    "Disambiguation",
    "Annotation",
    "AuthorType",
    "EditionGroupType",
    "PublisherType",
    "WorkType",
]
