from typing import Any, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session


def bump(db: Session, model, *criteria, set_values: Optional[dict[str, Any]] = None, **deltas: int) -> int:
    """Apply ``col = col + delta`` in SQL for the rows matching ``criteria``.

    Runs inside the caller's transaction. Pending ORM changes are flushed first
    and touched attributes of already loaded objects are refreshed afterwards.
    Returns the number of rows changed.
    """
    db.flush()
    values: dict[str, Any] = {col: getattr(model, col) + delta for col, delta in deltas.items()}
    if set_values:
        values.update(set_values)
    result = db.execute(
        update(model)
        .where(*criteria)
        .values(**values)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount
