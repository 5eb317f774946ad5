from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # MySQL DATETIME and SQLite hand back naive values; they are stored as UTC
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def sort_column(model, sort_by: str, sort_order: str, allowed: dict[str, str], default: str):
    """Resolve a whitelisted ``sort_by`` name to an ORDER BY clause."""
    column = getattr(model, allowed.get(sort_by, allowed[default]))
    return column.asc() if sort_order == "asc" else column.desc()
