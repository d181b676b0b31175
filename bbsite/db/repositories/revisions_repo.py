"""Repository helpers assembling revision history rows.

A page of revisions is fetched newest first, then each revision is completed
one after the other with its entity, default alias and parent alias.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from bbsite.db import app_session
from bbsite.db.models import Alias, AliasSet, Entity, EntityData, EntityRevision, Revision
from bbsite.utils.entities import get_revision_model_by_type, get_revision_models
from bbsite.utils.logging import get_logger

LOG = get_logger("revisions_repo")


def _probe_order():
    """SQL expression ranking entity types in the fixed revision-model order."""
    ranks = {
        model.__mapper__.polymorphic_identity: index
        for index, model in enumerate(get_revision_models())
    }
    return case(ranks, value=EntityRevision.entity_type, else_=len(ranks))


def get_parent_alias(
    session: Session,
    entity_type: str,
    bbid: str,
    revision_id: int,
) -> Optional[Dict[str, Any]]:
    """Default alias of the entity as it was before `revision_id`.

    Picks the most recent non-master revision of the entity below
    `revision_id`. All values are bound parameters.
    """
    model = get_revision_model_by_type(entity_type)
    alias = (
        session.query(Alias)
        .join(AliasSet, AliasSet.default_alias_id == Alias.id)
        .join(EntityData, EntityData.alias_set_id == AliasSet.id)
        .join(model, model.data_id == EntityData.id)
        .join(Entity, Entity.bbid == model.bbid)
        .filter(
            model.bbid == bbid,
            model.revision_id < revision_id,
            or_(
                Entity.master_revision_id.is_(None),
                Entity.master_revision_id != model.revision_id,
            ),
        )
        .order_by(model.revision_id.desc())
        .first()
    )
    return alias.as_dict() if alias else None


def get_complete_revision(session: Session, revision: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge one revision dict with its entity, default alias and parent alias.

    The concrete entity-revision row is resolved in a single query; when a
    revision touched several entities the first type in probe order wins.
    A revision without any entity row yields an empty dict.
    """
    revision_id = revision["id"]
    row = (
        session.query(EntityRevision)
        .options(
            joinedload(EntityRevision.entity),
            joinedload(EntityRevision.data)
            .joinedload(EntityData.alias_set)
            .joinedload(AliasSet.default_alias),
        )
        .filter(EntityRevision.revision_id == revision_id)
        .order_by(_probe_order(), EntityRevision.id)
        .first()
    )
    if row is None:
        LOG.debug("Revision %s has no entity revision rows", revision_id)
        return {}

    default_alias = None
    if row.data is not None and row.data.alias_set is not None:
        default_alias = row.data.alias_set.default_alias
    entity_dict = row.entity.as_dict() if row.entity is not None else {}

    parent_alias = None
    if entity_dict:
        parent_alias = get_parent_alias(session, entity_dict["type"], entity_dict["bbid"], revision_id)

    result: Dict[str, Any] = {"revision_id": revision_id}
    result.update(revision)
    result["editor"] = result.pop("author", None)
    result["default_alias"] = default_alias.as_dict() if default_alias else None
    result.update(entity_dict)
    result["parent_alias"] = parent_alias
    return result


def get_ordered_revisions(from_: int, size: int) -> List[Dict[str, Any]]:
    """Return one page of completed revisions, newest first."""
    with app_session() as session:
        revisions = (
            session.query(Revision)
            .options(
                joinedload(Revision.author),
                selectinload(Revision.parents),
                selectinload(Revision.notes),
            )
            .order_by(Revision.created_at.desc(), Revision.id.desc())
            .offset(from_)
            .limit(size)
            .all()
        )
        ordered = []
        for revision in revisions:
            ordered.append(get_complete_revision(session, revision.as_dict()))
        return ordered


def count_revisions() -> int:
    with app_session() as session:
        return int(session.query(func.count(Revision.id)).scalar() or 0)


__all__ = [
    "get_parent_alias",
    "get_complete_revision",
    "get_ordered_revisions",
    "count_revisions",
]
