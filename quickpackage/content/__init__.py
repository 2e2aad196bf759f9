"""
quickpackage.content

The content tree the packager reads from:

    - Item / ContentReference    : item versions and pointers to them
    - build_descendant_pattern   : "everything below P" as a query string
    - DescendantQuery            : the same predicate in structured form
    - ContentDatabase            : DB-backed tree with per-user read rights
"""

from .models import ContentReference, Item
from .query import DescendantQuery, build_descendant_pattern, path_segments
from .database import ContentDatabase

__all__ = [
    "ContentReference",
    "Item",
    "DescendantQuery",
    "build_descendant_pattern",
    "path_segments",
    "ContentDatabase",
]
