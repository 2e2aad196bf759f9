"""
DB-backed account registry.

Stores users and per-item read rules. A rule on an item applies to the
item and all its descendants until a deeper rule overrides it. Items
with no applicable rule are readable. Administrators bypass rules.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from ..db.connection import DBPool
from ..errors import AccountNotFound
from .context import User

ReadRule = Tuple[str, bool]   # (item path, can_read)


class AccountRegistry:
    """
    Database-backed user and access-rule registry.
    """

    def __init__(self, pool: DBPool):
        self.pool = pool

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def register_user(
        self,
        name: str,
        *,
        full_name: str = "",
        is_admin: bool = False,
    ) -> User:
        """
        Insert or update a user row and return the User record.
        """
        with self.pool.connection() as conn:
            conn.execute(
                """
                INSERT INTO users(name, full_name, is_admin)
                VALUES (?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    full_name = excluded.full_name,
                    is_admin = excluded.is_admin
                """,
                (name, full_name, 1 if is_admin else 0),
            )
            conn.commit()

        return User(name=name, full_name=full_name, is_admin=is_admin)

    def find_user(self, name: str) -> Optional[User]:
        with self.pool.connection() as conn:
            row = conn.fetch_one(
                "SELECT * FROM users WHERE name = ?",
                (name,),
            )
        if not row:
            return None
        return User(
            name=row["name"],
            full_name=row.get("full_name") or "",
            is_admin=bool(row.get("is_admin")),
        )

    def get_user(self, name: str) -> User:
        """
        Return the named user or raise AccountNotFound.
        """
        user = self.find_user(name)
        if user is None:
            raise AccountNotFound(f"User {name!r} does not exist")
        return user

    # ------------------------------------------------------------------
    # Read rules
    # ------------------------------------------------------------------

    def set_access(self, item_id: str, user_name: str, can_read: bool) -> None:
        with self.pool.connection() as conn:
            conn.execute(
                """
                INSERT INTO item_access(item_id, user_name, can_read)
                VALUES (?, ?, ?)
                ON CONFLICT(item_id, user_name) DO UPDATE SET
                    can_read = excluded.can_read
                """,
                (item_id, user_name, 1 if can_read else 0),
            )
            conn.commit()

    def read_rules(self, user_name: str) -> List[ReadRule]:
        """
        All read rules for a user, as (item path, can_read) pairs.
        """
        with self.pool.connection() as conn:
            rows = conn.fetch_all(
                """
                SELECT i.path AS path, a.can_read AS can_read
                FROM item_access a
                JOIN items i ON i.item_id = a.item_id
                WHERE a.user_name = ?
                """,
                (user_name,),
            )
        return [(row["path"], bool(row["can_read"])) for row in rows]

    def can_read(self, user: User, path: str) -> bool:
        if user.is_admin:
            return True
        return is_readable(path, self.read_rules(user.name))


def is_readable(path: str, rules: Iterable[ReadRule]) -> bool:
    """
    Resolve read access for `path` from the nearest rule on the path
    or one of its ancestors. Paths compare case-insensitively.
    """
    target = path.lower().rstrip("/")
    best_len = -1
    allowed = True

    for rule_path, can_read in rules:
        prefix = rule_path.lower().rstrip("/")
        if target != prefix and not target.startswith(prefix + "/"):
            continue
        if len(prefix) > best_len:
            best_len = len(prefix)
            allowed = can_read

    return allowed


__all__ = [
    "AccountRegistry",
    "ReadRule",
    "is_readable",
]
