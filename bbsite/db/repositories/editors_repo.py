"""Repository helpers for editor records."""
from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bbsite.db import app_session
from bbsite.db.models import Editor, Revision
from bbsite.utils.entities import get_date_before_days


class EditorNotFoundError(LookupError):
    """Raised when an editor id does not match any row."""


class EditorExistsError(Exception):
    """Raised when attempting to insert a duplicate editor name."""


def create_editor(name: str) -> Dict[str, object]:
    editor = Editor(name=name, edit_count=0)
    try:
        with app_session() as session:
            session.add(editor)
            session.flush()
            return editor.as_dict()
    except IntegrityError as exc:
        raise EditorExistsError("Editor already exists") from exc


def get_editor(editor_id: int) -> Optional[Dict[str, object]]:
    with app_session() as session:
        editor = session.get(Editor, editor_id)
        return editor.as_dict() if editor else None


def increment_editor_edit_count_by_id(session: Session, editor_id: int) -> Editor:
    """Add one to the editor's edit count inside the caller's transaction."""
    editor = session.get(Editor, editor_id)
    if editor is None:
        raise EditorNotFoundError("editor_missing")
    editor.increment_edit_count()
    return editor


def get_top_editors(limit: int = 10, days: Optional[int] = None) -> List[Dict[str, object]]:
    """Editors ranked by revisions authored, optionally within the last `days`."""
    revision_count = func.count(Revision.id).label("revision_count")
    with app_session() as session:
        query = session.query(Editor, revision_count).join(Revision, Revision.author_id == Editor.id)
        if days is not None:
            query = query.filter(Revision.created_at >= get_date_before_days(days))
        rows = (
            query.group_by(Editor.id)
            .order_by(revision_count.desc(), Editor.id)
            .limit(limit)
            .all()
        )
        results = []
        for editor, count in rows:
            payload = editor.as_dict()
            payload["revision_count"] = int(count)
            results.append(payload)
        return results


__all__ = [
    "EditorNotFoundError",
    "EditorExistsError",
    "create_editor",
    "get_editor",
    "increment_editor_edit_count_by_id",
    "get_top_editors",
]
