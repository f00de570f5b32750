"""Dialect-native ``INSERT .. ON CONFLICT`` builders.

Upserts are issued as one statement so the database serializes concurrent
writers to the same key; nothing here reads a row before writing it.
"""

from typing import Any, Callable, Dict, List

from sqlalchemy import Table
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlmodel import Session

UpdateBuilder = Callable[[Table, Any], Dict[str, Any]]


def build_upsert(
    session: Session,
    table: Table,
    values: Dict[str, Any],
    conflict_columns: List[str],
    update: UpdateBuilder,
):
    """``update(table, incoming)`` returns the SET clause; ``incoming`` is the
    row that failed to insert (``excluded`` / ``inserted`` depending on dialect).
    """
    dialect = session.get_bind().dialect.name

    if dialect in ("mysql", "mariadb"):
        stmt = mysql.insert(table).values(**values)
        return stmt.on_duplicate_key_update(**update(table, stmt.inserted))

    if dialect == "postgresql":
        stmt = postgresql.insert(table).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(table).values(**values)
    else:
        raise NotImplementedError(f"No upsert support for dialect {dialect!r}")

    return stmt.on_conflict_do_update(
        index_elements=[table.c[name] for name in conflict_columns],
        set_=update(table, stmt.excluded),
    )
