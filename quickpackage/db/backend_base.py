"""
Backend base interface for the content database.

Backends must expose:

    backend.connect() -> raw_connection
    backend.helpers   -> module with safe_execute, safe_fetch_all,
                         safe_fetch_one, row_to_dict
    backend.init_schema(conn)  # optional
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class DBBackend(ABC):
    """
    Abstract base class for a content database backend.

    Concrete subclasses may define any constructor signature they want
    (e.g. SQLiteBackend(db_path)).
    """

    @property
    @abstractmethod
    def helpers(self) -> Any:
        """
        Return the helper module associated with this backend.

        Normally this is quickpackage.db.helpers; test backends may
        provide compatible modules.
        """
        raise NotImplementedError

    @abstractmethod
    def connect(self) -> Any:
        """
        Acquire and return a new raw DB-API 2.0 connection.
        """
        raise NotImplementedError

    def init_schema(self, conn: Any) -> None:
        """
        Optional schema bootstrap. Default: no-op.
        """
        return None


__all__ = [
    "DBBackend",
]
