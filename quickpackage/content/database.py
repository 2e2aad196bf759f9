"""
DB-backed content database.

Stores the item tree and its language versions, and answers the reads
the packaging flow needs:

    - get_item / get_item_by_path   (single item, one language version)
    - select_items                  (DescendantQuery, tree order)

Every read takes an explicit SecurityContext. Items the acting user
cannot read are returned as missing (None) or left out of query results,
so an unprivileged caller simply sees a smaller tree.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict, List, Optional

from ..db.connection import DBPool
from ..security.accounts import AccountRegistry, is_readable
from ..security.context import SecurityContext
from .models import Item
from .query import DescendantQuery, path_segments

logger = logging.getLogger(__name__)


_ITEM_COLUMNS = """
    i.item_id     AS item_id,
    i.parent_id   AS parent_id,
    i.name        AS name,
    i.path        AS path,
    i.template    AS template,
    i.sort_order  AS sort_order
"""

# Latest version of an item in a language (0 when there is none).
_LATEST_VERSION = """
    COALESCE(
        (SELECT MAX(v.version) FROM item_versions v
         WHERE v.item_id = i.item_id AND v.language = ?),
        0
    )
"""

_LATEST_FIELDS = """
    (SELECT v.fields_json FROM item_versions v
     WHERE v.item_id = i.item_id AND v.language = ?
     ORDER BY v.version DESC LIMIT 1)
"""

# Depth-first walk below a parent. Sibling order is (sort_order, name);
# char(1) separates levels so it sorts before any printable name.
_DESCENDANTS_CTE = """
WITH RECURSIVE tree(item_id, sort_key) AS (
    SELECT c.item_id,
           printf('%010d', c.sort_order) || char(1) || c.name
    FROM items c
    WHERE {anchor}
    UNION ALL
    SELECT c.item_id,
           t.sort_key || char(1) || printf('%010d', c.sort_order) || char(1) || c.name
    FROM items c
    JOIN tree t ON c.parent_id = t.item_id
)
"""


class ContentDatabase:
    """
    Content tree stored in the configured DB backend.

    Parameters
    ----------
    pool :
        DBPool used for every read and write.
    accounts :
        AccountRegistry used to resolve read rights.
    name :
        Logical database name ("master"), stamped on every Item.
    default_language :
        Language used when a caller does not name one.
    """

    def __init__(
        self,
        pool: DBPool,
        accounts: AccountRegistry,
        *,
        name: str = "master",
        default_language: str = "en",
    ):
        self.pool = pool
        self.accounts = accounts
        self.name = name
        self.default_language = default_language

    # ------------------------------------------------------------------
    # Authoring
    # ------------------------------------------------------------------

    def add_item(
        self,
        name: str,
        *,
        parent_id: Optional[str] = None,
        item_id: Optional[str] = None,
        template: Optional[str] = None,
        sort_order: int = 0,
    ) -> str:
        """
        Create an item under `parent_id` (or at the top of the tree) and
        return its id. The item has no versions until add_version().

        Paths are unique ignoring case: a sibling whose name differs only
        in case from an existing one is rejected.
        """
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise ValueError(f"Invalid item name: {name!r}")

        item_id = item_id or str(uuid.uuid4())

        with self.pool.connection() as conn:
            if parent_id is None:
                path = "/" + name
            else:
                parent = conn.fetch_one(
                    "SELECT path FROM items WHERE item_id = ?",
                    (parent_id,),
                )
                if not parent:
                    raise ValueError(f"Parent item {parent_id!r} does not exist")
                path = parent["path"].rstrip("/") + "/" + name

            clash = conn.fetch_one(
                "SELECT item_id FROM items WHERE path = ? COLLATE NOCASE",
                (path,),
            )
            if clash:
                raise ValueError(
                    f"Path {path!r} is already taken by item {clash['item_id']!r}"
                )

            conn.execute(
                """
                INSERT INTO items(item_id, parent_id, name, path, template, sort_order)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (item_id, parent_id, name, path, template, sort_order),
            )
            conn.commit()

        logger.debug("Created item %s at %s", item_id, path)
        return item_id

    def add_version(
        self,
        item_id: str,
        fields: Optional[Dict[str, Any]] = None,
        *,
        language: Optional[str] = None,
    ) -> int:
        """
        Append a new version of `item_id` in `language` and return its
        version number (1-based).
        """
        language = language or self.default_language

        with self.pool.connection() as conn:
            row = conn.fetch_one(
                """
                SELECT COALESCE(MAX(version), 0) AS latest
                FROM item_versions
                WHERE item_id = ? AND language = ?
                """,
                (item_id, language),
            )
            version = int(row["latest"]) + 1 if row else 1

            conn.execute(
                """
                INSERT INTO item_versions(item_id, language, version, fields_json)
                VALUES (?, ?, ?, ?)
                """,
                (item_id, language, version, json.dumps(fields or {})),
            )
            conn.commit()

        return version

    def delete_item(self, item_id: str) -> None:
        """Delete an item, its versions and its whole subtree."""
        with self.pool.connection() as conn:
            conn.execute("DELETE FROM items WHERE item_id = ?", (item_id,))
            conn.commit()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_item(
        self,
        item_id: str,
        context: SecurityContext,
        *,
        language: Optional[str] = None,
        version: Optional[int] = None,
    ) -> Optional[Item]:
        """
        Fetch one language version of an item by id.

        version None (or 0) selects the latest version. Returns None if
        the item, or the requested version, does not exist or is not
        readable in `context`.
        """
        return self._get_one("i.item_id = ?", (item_id,), context, language, version)

    def get_item_by_path(
        self,
        path: str,
        context: SecurityContext,
        *,
        language: Optional[str] = None,
        version: Optional[int] = None,
    ) -> Optional[Item]:
        """
        Same as get_item but addressed by canonical path (case-insensitive).
        """
        segments = path_segments(path)
        if not segments:
            return None
        canonical = "/" + "/".join(segments)
        return self._get_one(
            "i.path = ? COLLATE NOCASE", (canonical,), context, language, version
        )

    def select_items(
        self,
        query: DescendantQuery,
        context: SecurityContext,
    ) -> List[Item]:
        """
        Execute a DescendantQuery and return matching items in tree
        order (depth-first, siblings by sort order then name).

        A base path that does not exist matches nothing.
        """
        context.ensure_active()
        language = query.language or self.default_language

        if query.is_root:
            anchor, params = "c.parent_id IS NULL", ()
        else:
            anchor = (
                "c.parent_id = (SELECT item_id FROM items "
                "WHERE path = ? COLLATE NOCASE)"
            )
            params = (query.base_path,)

        sql = _DESCENDANTS_CTE.format(anchor=anchor) + f"""
            SELECT {_ITEM_COLUMNS},
                   {_LATEST_VERSION} AS version,
                   {_LATEST_FIELDS} AS fields_json
            FROM tree t
            JOIN items i ON i.item_id = t.item_id
            ORDER BY t.sort_key
        """

        with self.pool.connection() as conn:
            rows = conn.fetch_all(sql, params + (language, language))

        logger.debug("Query %s matched %d item(s)", query.pattern, len(rows))

        items = [self._row_to_item(row, language) for row in rows]
        return self._readable(items, context)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get_one(
        self,
        where: str,
        params: tuple,
        context: SecurityContext,
        language: Optional[str],
        version: Optional[int],
    ) -> Optional[Item]:
        context.ensure_active()
        language = language or self.default_language

        if version:
            sql = f"""
                SELECT {_ITEM_COLUMNS}, v.version AS version, v.fields_json AS fields_json
                FROM items i
                JOIN item_versions v
                  ON v.item_id = i.item_id AND v.language = ? AND v.version = ?
                WHERE {where}
            """
            query_params = (language, int(version)) + params
        else:
            sql = f"""
                SELECT {_ITEM_COLUMNS},
                       {_LATEST_VERSION} AS version,
                       {_LATEST_FIELDS} AS fields_json
                FROM items i
                WHERE {where}
            """
            query_params = (language, language) + params

        with self.pool.connection() as conn:
            row = conn.fetch_one(sql, query_params)

        if not row:
            return None

        item = self._row_to_item(row, language)
        if not self._can_read(item, context):
            logger.debug("Item %s hidden from %s", item.path, context.user.name)
            return None
        return item

    def _row_to_item(self, row: Dict[str, Any], language: str) -> Item:
        return Item(
            database=self.name,
            item_id=row["item_id"],
            name=row["name"],
            path=row["path"],
            language=language,
            version=int(row.get("version") or 0),
            parent_id=row.get("parent_id"),
            template=row.get("template"),
            sort_order=int(row.get("sort_order") or 0),
            fields=json.loads(row.get("fields_json") or "{}"),
        )

    def _can_read(self, item: Item, context: SecurityContext) -> bool:
        return self.accounts.can_read(context.user, item.path)

    def _readable(self, items: List[Item], context: SecurityContext) -> List[Item]:
        if context.user.is_admin:
            return items
        rules = self.accounts.read_rules(context.user.name)
        return [item for item in items if is_readable(item.path, rules)]


__all__ = [
    "ContentDatabase",
]
