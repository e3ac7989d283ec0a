# app/services/pagination.py
from typing import Any, Optional
from sqlalchemy import Select, and_, or_
from sqlalchemy.orm import Session


def paginate(db: Session, stmt: Select, model: Any, id_col, order_col, cursor: Optional[str], limit: int):
    """Keyset pagination, newest first.

    `cursor` is the id of the first row of the requested page (the
    `next_cursor` of the previous page). Returns `(rows, next_cursor)`.
    """
    if cursor:
        anchor = db.get(model, cursor)
        if anchor is not None:
            anchor_value = getattr(anchor, order_col.key)
            stmt = stmt.where(or_(order_col < anchor_value, and_(order_col == anchor_value, id_col <= cursor)))

    rows = list(db.execute(stmt.order_by(order_col.desc(), id_col.desc()).limit(limit + 1)).scalars().all())

    next_cursor = None
    if len(rows) > limit:
        next_cursor = getattr(rows.pop(), id_col.key)
    return rows, next_cursor
