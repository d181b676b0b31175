"""Database layer root."""

from .engine import (
    init_engine_once,
    get_engine,
    get_session_factory,
    get_scoped_session,
    app_session,
    truncate_tables,
)

__all__ = [
    "init_engine_once",
    "get_engine",
    "get_session_factory",
    "get_scoped_session",
    "app_session",
    "truncate_tables",
]
