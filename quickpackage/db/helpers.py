"""
SQL execution helpers shared by the content database backends.

Errors raised by the driver are re-raised as RuntimeError carrying the
statement, so a failed descendant query or insert shows what was sent.

Backends expose this module as `backend.helpers`.
"""

from __future__ import annotations
from typing import Any, Optional


def safe_execute(conn: Any, query: str, params: Optional[tuple] = None):
    """
    Run one statement on a raw connection and return its cursor.

    Raises
    ------
    RuntimeError
        The driver rejected the statement; the original error is chained.
    """
    cur = conn.cursor()
    try:
        cur.execute(query, params or ())
    except Exception as e:
        raise RuntimeError(
            f"DB execute failed: {e} | Query: {query!r} | Params: {params!r}"
        ) from e
    return cur


def safe_fetch_all(conn: Any, query: str, params: Optional[tuple] = None):
    return safe_execute(conn, query, params).fetchall()


def safe_fetch_one(conn: Any, query: str, params: Optional[tuple] = None):
    return safe_execute(conn, query, params).fetchone()


def row_to_dict(row: Any) -> dict:
    """sqlite3.Row -> plain dict keyed by column alias."""
    return {k: row[k] for k in row.keys()}


__all__ = [
    "safe_execute",
    "safe_fetch_all",
    "safe_fetch_one",
    "row_to_dict",
]
