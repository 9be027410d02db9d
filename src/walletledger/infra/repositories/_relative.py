"""Relative column updates that keep identity-mapped rows in sync."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm.util import identity_key
from sqlmodel import Session


def increment_column(session: Session, model: Any, row_id: int, column: str, delta: Decimal) -> int:
    """Run ``UPDATE model SET column = column + delta WHERE id = row_id``.

    The arithmetic happens in the database so concurrent deltas serialize
    under the store's row locks instead of racing a read-modify-write.
    Returns the number of rows matched.
    """

    session.flush()
    target = getattr(model, column)
    result = session.connection().execute(
        update(model).where(model.id == row_id).values({column: target + delta})
    )
    cached = session.identity_map.get(identity_key(model, row_id))
    if cached is not None:
        session.expire(cached, [column])
    return result.rowcount
