"""Declarative base shared by every ORM model."""
from __future__ import annotations

import datetime

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime.datetime:
    return datetime.datetime.utcnow()


def isoformat(value: datetime.datetime | None) -> str | None:
    return value.isoformat() if value else None


__all__ = ["Base", "utcnow", "isoformat"]
