"""ORM models for entities and their per-revision data.

`Entity` and `EntityRevision` both use single-table inheritance keyed by the
entity type name, so resolving a revision row to its concrete type never
needs more than one query.
"""
from __future__ import annotations

import uuid

from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base

ENTITY_TYPES = ("Author", "Edition", "EditionGroup", "Publisher", "Work")

# Relationship on EntityData holding the type vocabulary term per entity type.
TYPE_TERM_ATTRIBUTES = {
    "Author": "author_type",
    "EditionGroup": "edition_group_type",
    "Publisher": "publisher_type",
    "Work": "work_type",
}


def _new_bbid() -> str:
    return str(uuid.uuid4())


entity_data__language = Table(
    "entity_data__language",
    Base.metadata,
    Column("data_id", Integer, ForeignKey("entity_data.id"), primary_key=True),
    Column("language_id", Integer, ForeignKey("language.id"), primary_key=True),
)


class EntityData(Base):
    """Editable fields of one entity at one revision. Never updated in place."""

    __tablename__ = "entity_data"

    id = Column(Integer, primary_key=True, autoincrement=True)
    alias_set_id = Column(Integer, ForeignKey("alias_set.id"), nullable=False)
    identifier_set_id = Column(Integer, ForeignKey("identifier_set.id"), nullable=True)
    disambiguation_id = Column(Integer, ForeignKey("disambiguation.id"), nullable=True)
    annotation_id = Column(Integer, ForeignKey("annotation.id"), nullable=True)
    author_type_id = Column(Integer, ForeignKey("author_type.id"), nullable=True)
    edition_group_type_id = Column(Integer, ForeignKey("edition_group_type.id"), nullable=True)
    publisher_type_id = Column(Integer, ForeignKey("publisher_type.id"), nullable=True)
    work_type_id = Column(Integer, ForeignKey("work_type.id"), nullable=True)

    alias_set = relationship("AliasSet")
    identifier_set = relationship("IdentifierSet")
    disambiguation = relationship("Disambiguation")
    annotation = relationship("Annotation")
    author_type = relationship("AuthorType")
    edition_group_type = relationship("EditionGroupType")
    publisher_type = relationship("PublisherType")
    work_type = relationship("WorkType")
    languages = relationship("Language", secondary=entity_data__language, order_by="Language.id")

    def type_term(self, entity_type: str):
        attr = TYPE_TERM_ATTRIBUTES.get(entity_type)
        return getattr(self, attr) if attr else None


class Entity(Base):
    __tablename__ = "entity"

    bbid = Column(String(36), primary_key=True, default=_new_bbid)
    type = Column(String(32), nullable=False, index=True)
    master_revision_id = Column(Integer, ForeignKey("revision.id"), nullable=True)

    master_revision = relationship("Revision", foreign_keys=[master_revision_id])
    revisions = relationship(
        "EntityRevision",
        back_populates="entity",
        order_by="EntityRevision.revision_id",
    )

    __mapper_args__ = {"polymorphic_on": type}

    def master_entity_revision(self):
        for row in self.revisions:
            if row.revision_id == self.master_revision_id:
                return row
        return None

    def as_dict(self) -> dict:
        return {
            "bbid": self.bbid,
            "type": self.type,
            "master_revision_id": self.master_revision_id,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<{self.type} bbid={self.bbid}>"


class Author(Entity):
    __mapper_args__ = {"polymorphic_identity": "Author"}


class Edition(Entity):
    __mapper_args__ = {"polymorphic_identity": "Edition"}


class EditionGroup(Entity):
    __mapper_args__ = {"polymorphic_identity": "EditionGroup"}


class Publisher(Entity):
    __mapper_args__ = {"polymorphic_identity": "Publisher"}


class Work(Entity):
    __mapper_args__ = {"polymorphic_identity": "Work"}


class EntityRevision(Base):
    """Links a revision to the entity it touched and the data it produced.

    `entity_type` is the discriminator; one revision may touch several
    entities (one row each).
    """

    __tablename__ = "entity_revision"

    id = Column(Integer, primary_key=True, autoincrement=True)
    revision_id = Column(Integer, ForeignKey("revision.id"), nullable=False, index=True)
    bbid = Column(String(36), ForeignKey("entity.bbid"), nullable=False, index=True)
    data_id = Column(Integer, ForeignKey("entity_data.id"), nullable=True)
    entity_type = Column(String(32), nullable=False, index=True)

    revision = relationship("Revision", back_populates="entity_revisions")
    entity = relationship("Entity", back_populates="revisions")
    data = relationship("EntityData")

    __table_args__ = (
        UniqueConstraint("revision_id", "bbid", name="uq_entity_revision_revision_bbid"),
    )
    __mapper_args__ = {"polymorphic_on": entity_type}


class AuthorRevision(EntityRevision):
    __mapper_args__ = {"polymorphic_identity": "Author"}


class EditionRevision(EntityRevision):
    __mapper_args__ = {"polymorphic_identity": "Edition"}


class EditionGroupRevision(EntityRevision):
    __mapper_args__ = {"polymorphic_identity": "EditionGroup"}


class PublisherRevision(EntityRevision):
    __mapper_args__ = {"polymorphic_identity": "Publisher"}


class WorkRevision(EntityRevision):
    __mapper_args__ = {"polymorphic_identity": "Work"}


__all__ = [
    "ENTITY_TYPES",
    "TYPE_TERM_ATTRIBUTES",
    "EntityData",
    "Entity",
    "Author",
    "Edition",
    "EditionGroup",
    "Publisher",
    "Work",
    "EntityRevision",
    "AuthorRevision",
    "EditionRevision",
    "EditionGroupRevision",
    "PublisherRevision",
    "WorkRevision",
]
