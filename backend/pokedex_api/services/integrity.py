"""
Pokedex API — Uniqueness Checks
================================

What:  Storage-backed uniqueness helpers shared by the services.
Why:   Uniqueness is checked twice. The pre-check gives a friendly message
       in the normal case; the unique indexes catch the racing case, where
       two requests both pass the pre-check and the second INSERT fails on
       flush. Both paths must produce the same 422 payload.

Constraint matching:
    PostgreSQL reports the index name ("ix_pokemons_number"); SQLite reports
    the columns ("UNIQUE constraint failed: pokemons.number"). Matching on
    "<table>_<column>" or "<table>.<column>" covers both.
"""

from typing import Any, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute


async def value_taken(
    db: AsyncSession,
    column: InstrumentedAttribute,
    value: Any,
    exclude_id: Optional[int] = None,
) -> bool:
    """True if another row already stores `value` in `column`."""
    model = column.class_
    query = select(model.id).where(column == value)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.first() is not None


def violated_columns(
    exc: IntegrityError,
    table: str,
    columns: Iterable[str],
) -> List[str]:
    """Columns of `table` named by a unique-violation IntegrityError."""
    detail = str(exc.orig).lower()
    if "unique" not in detail and "duplicate" not in detail:
        return []
    return [
        column for column in columns
        if f"{table}.{column}" in detail or f"{table}_{column}" in detail
    ]
