"""
Connection handling for the content database.

    DBConnection  wraps one raw connection and returns rows as dicts
    DBPool        opens connections from a backend; use it as

        with pool.connection() as conn:
            conn.execute(...)
            conn.commit()

A connection lives for one `with` block. Writes are committed by the
caller; leaving the block with an exception rolls back.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class DBConnection:
    """One open connection plus the backend's helper module."""

    def __init__(self, raw_conn: Any, helpers: Any):
        self.raw = raw_conn
        self.helpers = helpers

    def execute(self, query: str, params: Optional[tuple] = None):
        return self.helpers.safe_execute(self.raw, query, params)

    def fetch_all(self, query: str, params: Optional[tuple] = None) -> List[Dict[str, Any]]:
        rows = self.helpers.safe_fetch_all(self.raw, query, params)
        return [self.helpers.row_to_dict(r) for r in rows]

    def fetch_one(self, query: str, params: Optional[tuple] = None) -> Optional[Dict[str, Any]]:
        row = self.helpers.safe_fetch_one(self.raw, query, params)
        return self.helpers.row_to_dict(row) if row is not None else None

    def commit(self) -> None:
        try:
            self.raw.commit()
        except Exception as e:
            raise RuntimeError(f"Commit failed: {e}") from e

    def rollback(self) -> None:
        try:
            self.raw.rollback()
        except Exception:
            logger.warning("Rollback failed", exc_info=True)

    def close(self) -> None:
        try:
            self.raw.close()
        except Exception:
            logger.debug("Ignoring error on connection close", exc_info=True)


class DBPool:
    """Opens a fresh backend connection per `connection()` block."""

    def __init__(self, backend: Any):
        self.backend = backend

    def get(self) -> DBConnection:
        return DBConnection(self.backend.connect(), self.backend.helpers)

    def connection(self) -> "_ConnectionContext":
        return _ConnectionContext(self)


class _ConnectionContext:

    def __init__(self, pool: DBPool):
        self.pool = pool
        self.conn: Optional[DBConnection] = None

    def __enter__(self) -> DBConnection:
        self.conn = self.pool.get()
        return self.conn

    def __exit__(self, exc_type, exc, tb):
        if self.conn is None:
            return False
        if exc_type is not None:
            self.conn.rollback()
        self.conn.close()
        return False
