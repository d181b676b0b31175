"""ORM models for editors, revisions and revision notes."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from .base import Base, isoformat, utcnow

revision_parent = Table(
    "revision_parent",
    Base.metadata,
    Column("parent_id", Integer, ForeignKey("revision.id"), primary_key=True),
    Column("child_id", Integer, ForeignKey("revision.id"), primary_key=True),
)


class Editor(Base):
    __tablename__ = "editor"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), nullable=False, unique=True)
    edit_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    revisions = relationship("Revision", back_populates="author")

    def increment_edit_count(self) -> None:
        self.edit_count = (self.edit_count or 0) + 1

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "edit_count": self.edit_count or 0,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Editor id={self.id} name={self.name}>"


class Revision(Base):
    """Immutable snapshot marker; entity rows hang off it via EntityRevision."""

    __tablename__ = "revision"

    id = Column(Integer, primary_key=True, autoincrement=True)
    author_id = Column(Integer, ForeignKey("editor.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    author = relationship("Editor", back_populates="revisions")
    parents = relationship(
        "Revision",
        secondary=revision_parent,
        primaryjoin=lambda: Revision.id == revision_parent.c.child_id,
        secondaryjoin=lambda: Revision.id == revision_parent.c.parent_id,
        order_by=lambda: Revision.id,
        backref="children",
    )
    notes = relationship("Note", back_populates="revision", order_by="Note.id")
    entity_revisions = relationship("EntityRevision", back_populates="revision")

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "created_at": isoformat(self.created_at),
            "author": self.author.as_dict() if self.author else None,
            "parent_ids": [parent.id for parent in self.parents],
            "notes": [note.as_dict() for note in self.notes],
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Revision id={self.id} author_id={self.author_id}>"


class Note(Base):
    __tablename__ = "note"

    id = Column(Integer, primary_key=True, autoincrement=True)
    revision_id = Column(Integer, ForeignKey("revision.id"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("editor.id"), nullable=False)
    content = Column(Text, nullable=False)
    posted_at = Column(DateTime, default=utcnow, nullable=False)

    revision = relationship("Revision", back_populates="notes")

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "author_id": self.author_id,
            "content": self.content,
            "posted_at": isoformat(self.posted_at),
        }


__all__ = ["Editor", "Revision", "Note", "revision_parent"]
