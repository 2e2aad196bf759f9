"""
Descendant selection.

Two forms of the same question, "every item strictly below path P":

    build_descendant_pattern("/sitecore/content/Home")
        -> "/#sitecore#/#content#/#Home#//*"

    DescendantQuery.from_path("/sitecore/content/Home")

The string form wraps each segment in `#...#` so names containing query
syntax are read as literal names, and ends in the `//*` all-descendants
wildcard. It is what gets logged and shown to operators.

The content database only ever executes the structured DescendantQuery;
it never parses the pattern string.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

LITERAL_DELIMITER = "#"
DESCENDANTS_SUFFIX = "//*"


def path_segments(path: str) -> Tuple[str, ...]:
    """Split a slash-delimited path into its non-empty segments."""
    if path is None:
        raise ValueError("path must not be None")
    return tuple(segment for segment in path.split("/") if segment)


def build_descendant_pattern(path: str) -> str:
    """
    Build the query pattern that selects every item below `path`.

    A path with no segments yields "//*", which matches the whole tree.
    """
    segments = path_segments(path)
    if not segments:
        return DESCENDANTS_SUFFIX

    quoted = "/".join(
        f"{LITERAL_DELIMITER}{segment}{LITERAL_DELIMITER}" for segment in segments
    )
    return f"/{quoted}{DESCENDANTS_SUFFIX}"


@dataclass(frozen=True)
class DescendantQuery:
    """
    Structured "descendants of path" predicate.

    language:
        Which language version to return for each match. None means the
        content database's default language.
    """

    segments: Tuple[str, ...]
    language: Optional[str] = None

    @classmethod
    def from_path(cls, path: str, language: Optional[str] = None) -> "DescendantQuery":
        return cls(segments=path_segments(path), language=language)

    @property
    def base_path(self) -> str:
        return "/" + "/".join(self.segments)

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def pattern(self) -> str:
        return build_descendant_pattern(self.base_path)


__all__ = [
    "build_descendant_pattern",
    "path_segments",
    "DescendantQuery",
]
