"""ORM models aggregate exports.

Importing this package registers every table on `Base.metadata`.
"""
from .base import Base  # noqa: F401
from .sets import (  # noqa: F401
	Alias,
	AliasSet,
	Annotation,
	AuthorType,
	Disambiguation,
	EditionGroupType,
	Identifier,
	IdentifierSet,
	IdentifierType,
	Language,
	PublisherType,
	WorkType,
)
from .revisions import Editor, Note, Revision  # noqa: F401
from .entities import (  # noqa: F401
	ENTITY_TYPES,
	TYPE_TERM_ATTRIBUTES,
	Author,
	AuthorRevision,
	Edition,
	EditionGroup,
	EditionGroupRevision,
	EditionRevision,
	Entity,
	EntityData,
	EntityRevision,
	Publisher,
	PublisherRevision,
	Work,
	WorkRevision,
)

__all__ = [
	"Base",
	"Alias",
	"AliasSet",
	"Annotation",
	"AuthorType",
	"Disambiguation",
	"EditionGroupType",
	"Identifier",
	"IdentifierSet",
	"IdentifierType",
	"Language",
	"PublisherType",
	"WorkType",
	"Editor",
	"Note",
	"Revision",
	"ENTITY_TYPES",
	"TYPE_TERM_ATTRIBUTES",
	"Author",
	"AuthorRevision",
	"Edition",
	"EditionGroup",
	"EditionGroupRevision",
	"EditionRevision",
	"Entity",
	"EntityData",
	"EntityRevision",
	"Publisher",
	"PublisherRevision",
	"Work",
	"WorkRevision",
]
