"""Revision history listing service."""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from bbsite import config as app_config
from bbsite.db.repositories import revisions_repo


class PagingError(ValueError):
    """Raised when `from`/`size` query values are not usable."""


def parse_paging(raw_from: Any, raw_size: Any) -> Tuple[int, int]:
    """Turn raw query values into a (from, size) pair; size is capped."""
    try:
        from_ = int(raw_from) if raw_from not in (None, "") else 0
    except (TypeError, ValueError):
        raise PagingError("invalid_from") from None
    try:
        size = int(raw_size) if raw_size not in (None, "") else app_config.revisions_page_size()
    except (TypeError, ValueError):
        raise PagingError("invalid_size") from None
    if from_ < 0:
        raise PagingError("invalid_from")
    if size <= 0:
        raise PagingError("invalid_size")
    return from_, min(size, app_config.revisions_max_page_size())


def list_revisions(from_: int = 0, size: Optional[int] = None) -> Dict[str, Any]:
    from_, size = parse_paging(from_, size)
    results = revisions_repo.get_ordered_revisions(from_, size)
    return {
        "results": results,
        "from": from_,
        "size": size,
        "total": revisions_repo.count_revisions(),
    }


__all__ = ["PagingError", "parse_paging", "list_revisions"]
