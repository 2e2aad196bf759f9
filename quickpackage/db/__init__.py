"""
quickpackage.db

Storage layer for the content database: a backend interface, the SQLite
backend, and the pooled connection wrapper the registries read through.
"""

from .connection import DBConnection, DBPool
from .sqlite_backend import SQLiteBackend
from .backend_base import DBBackend

__all__ = [
    "DBConnection",
    "DBPool",
    "SQLiteBackend",
    "DBBackend",
]
