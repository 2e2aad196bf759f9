"""
SQLite backend for the content database.

Used for:
    - local development
    - tests
    - single-node installations and CLI tools

Implements:
    - connect()
    - helpers      (required by DBBackend abstract interface)
    - init_schema()
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from . import helpers
from .backend_base import DBBackend

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Canonical Schema (v1)
# ----------------------------------------------------------------------

SQL_SCHEMA = """
-- ============================================================
-- QuickPackage content schema (v1)
-- ============================================================

CREATE TABLE IF NOT EXISTS schema_version (
    version      INTEGER NOT NULL,
    applied_at   TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- ------------------------------------------------------------
-- Item tree. `path` is the full slash-delimited path of the item
-- and is unique ignoring case, as path lookups are case-insensitive.
-- ------------------------------------------------------------
CREATE TABLE IF NOT EXISTS items (
    item_id      TEXT PRIMARY KEY,
    parent_id    TEXT,
    name         TEXT NOT NULL,
    path         TEXT UNIQUE NOT NULL COLLATE NOCASE,
    template     TEXT,
    sort_order   INTEGER DEFAULT 0,
    created_at   TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (parent_id) REFERENCES items(item_id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_items_parent
    ON items(parent_id);

-- ------------------------------------------------------------
-- Language / version payloads
-- ------------------------------------------------------------
CREATE TABLE IF NOT EXISTS item_versions (
    item_id      TEXT NOT NULL,
    language     TEXT NOT NULL,
    version      INTEGER NOT NULL,
    fields_json  TEXT,
    updated_at   TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (item_id, language, version),
    FOREIGN KEY (item_id) REFERENCES items(item_id) ON DELETE CASCADE
);

-- ------------------------------------------------------------
-- Accounts and read rules
-- ------------------------------------------------------------
CREATE TABLE IF NOT EXISTS users (
    name         TEXT PRIMARY KEY,
    full_name    TEXT,
    is_admin     INTEGER DEFAULT 0
);

CREATE TABLE IF NOT EXISTS item_access (
    item_id      TEXT NOT NULL,
    user_name    TEXT NOT NULL,
    can_read     INTEGER NOT NULL,
    PRIMARY KEY (item_id, user_name),
    FOREIGN KEY (item_id) REFERENCES items(item_id) ON DELETE CASCADE,
    FOREIGN KEY (user_name) REFERENCES users(name) ON DELETE CASCADE
);

INSERT INTO schema_version (version)
SELECT 1
WHERE NOT EXISTS (SELECT 1 FROM schema_version);
"""


# ----------------------------------------------------------------------
# Backend implementation
# ----------------------------------------------------------------------

class SQLiteBackend(DBBackend):
    """
    Minimal SQLite backend.

    Parameters
    ----------
    db_path : str
        Path to the SQLite database file.
    """

    def __init__(self, db_path: str):
        self.path = Path(db_path)
        self._helpers = helpers

    @property
    def helpers(self):
        return self._helpers

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------

    def connect(self) -> sqlite3.Connection:
        """
        Open a SQLite3 connection with row_factory=dict-like access.

        Also ensures foreign keys are enforced.
        """
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    # ------------------------------------------------------------------
    # Schema initializer
    # ------------------------------------------------------------------

    def init_schema(self, conn) -> None:
        """
        Create tables and indices if they do not exist.

        Idempotent - safe to call multiple times.
        """
        logger.debug("Initialising content schema at %s", self.path)
        cur = conn.cursor()
        cur.executescript(SQL_SCHEMA)
        conn.commit()
