"""
Reference collection.

Turns a selected root item (plus, optionally, everything below it) into
the ordered list of content references a package will contain. The root
is always first; descendants follow in the order storage returns them.
"""

from __future__ import annotations

import logging
from typing import List

from ..content.database import ContentDatabase
from ..content.models import ContentReference, Item
from ..content.query import DescendantQuery
from ..errors import PreconditionFailure, QueryFailure
from ..security.context import SecurityContext

logger = logging.getLogger(__name__)


class ReferenceCollector:
    def __init__(self, database: ContentDatabase):
        self.database = database

    def collect(
        self,
        root: Item,
        include_descendants: bool,
        context: SecurityContext,
    ) -> List[ContentReference]:
        """
        Collect references for `root` and, if requested, its descendants.

        The root is re-read by path so the reference reflects what is in
        storage now, not the possibly stale `root` handle. The path must
        still belong to the same item.

        Raises
        ------
        PreconditionFailure
            The root can no longer be resolved.
        QueryFailure
            The descendant query failed. An empty result is not a failure.
        """
        current = self.database.get_item_by_path(
            root.path,
            context,
            language=root.language,
            version=root.version or None,
        )
        if current is None:
            raise PreconditionFailure(f"Item {root.path!r} not found")
        if current.item_id != root.item_id:
            raise PreconditionFailure(
                f"Path {root.path!r} now resolves to item {current.item_id!r}, "
                f"not {root.item_id!r}"
            )

        references = [current.reference]
        if not include_descendants:
            return references

        query = DescendantQuery.from_path(current.path, language=current.language)
        try:
            descendants = self.database.select_items(query, context)
        except Exception as exc:
            raise QueryFailure(f"Query {query.pattern!r} failed: {exc}") from exc

        seen = {references[0]}
        for item in descendants:
            ref = item.reference
            if ref in seen:
                continue
            seen.add(ref)
            references.append(ref)

        logger.info(
            "Collected %d reference(s) for %s (%d descendant match(es))",
            len(references), current.path, len(descendants),
        )
        return references


__all__ = [
    "ReferenceCollector",
]
