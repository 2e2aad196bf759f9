"""
Export manifest (package project).

The manifest is the declarative description of a package:

    - metadata   : package name, author and optional descriptive fields
    - sources    : named groups of content reference tokens, in order

Design constraints:

    - A SourceGroup's entry list only grows; entries are never removed
      or reordered once added.
    - A group holds each token at most once. Callers dedupe before
      adding; a duplicate is a programming error and raises ValueError.
    - The manifest serializes to a plain JSON object with stable key
      order. Timestamps (created_at) are wall-clock values, so two
      archives built from the same input differ in those fields only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..content.models import ContentReference

JsonDict = Dict[str, Any]


# ----------------------------------------------------------------------
# Metadata
# ----------------------------------------------------------------------

@dataclass
class PackageMetadata:
    package_name: str
    author: str = ""
    version: str = ""
    publisher: str = ""
    readme: str = ""
    comment: str = ""
    created_at: Optional[str] = None

    def ensure_created_at(self) -> None:
        """
        Ensure created_at is set to an ISO8601 timestamp if missing.
        """
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> JsonDict:
        return {
            "package_name": self.package_name,
            "author": self.author,
            "version": self.version,
            "publisher": self.publisher,
            "readme": self.readme,
            "comment": self.comment,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, d: JsonDict) -> "PackageMetadata":
        return cls(
            package_name=str(d.get("package_name") or ""),
            author=str(d.get("author") or ""),
            version=str(d.get("version") or ""),
            publisher=str(d.get("publisher") or ""),
            readme=str(d.get("readme") or ""),
            comment=str(d.get("comment") or ""),
            created_at=d.get("created_at"),
        )


# ----------------------------------------------------------------------
# Source group
# ----------------------------------------------------------------------

class SourceGroup:
    """
    Named, ordered, append-only list of content reference tokens.
    """

    def __init__(self, name: str, entries: Iterable[str] = ()):
        self.name = name
        self._entries: List[str] = []
        self._seen = set()
        self.extend(entries)

    @property
    def entries(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def add_entry(self, entry: str) -> None:
        if entry in self._seen:
            raise ValueError(f"Duplicate entry in source {self.name!r}: {entry}")
        self._seen.add(entry)
        self._entries.append(entry)

    def add_reference(self, reference: ContentReference) -> None:
        self.add_entry(reference.to_token())

    def extend(self, entries: Iterable[str]) -> None:
        for entry in entries:
            self.add_entry(entry)

    def references(self) -> List[ContentReference]:
        return [ContentReference.from_token(e) for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def to_dict(self) -> JsonDict:
        return {"name": self.name, "entries": list(self._entries)}

    def __repr__(self) -> str:
        return f"SourceGroup(name={self.name!r}, entries={len(self._entries)})"


# ----------------------------------------------------------------------
# Manifest
# ----------------------------------------------------------------------

@dataclass
class ExportManifest:
    """
    Package project: metadata plus ordered source groups.

    save_project:
        When True the generator stores the serialized manifest inside
        the archive (installer/project) so the package can be reopened
        and rebuilt.
    """

    metadata: PackageMetadata
    sources: List[SourceGroup] = field(default_factory=list)
    save_project: bool = True

    @classmethod
    def create(cls, package_name: str, author: str = "") -> "ExportManifest":
        manifest = cls(metadata=PackageMetadata(package_name=package_name, author=author))
        manifest.metadata.ensure_created_at()
        return manifest

    def add_source(self, name: str) -> SourceGroup:
        source = SourceGroup(name)
        self.sources.append(source)
        return source

    @property
    def entry_count(self) -> int:
        return sum(len(s) for s in self.sources)

    def to_dict(self) -> JsonDict:
        return {
            "metadata": self.metadata.to_dict(),
            "sources": [s.to_dict() for s in self.sources],
            "save_project": self.save_project,
        }

    @classmethod
    def from_dict(cls, d: JsonDict) -> "ExportManifest":
        return cls(
            metadata=PackageMetadata.from_dict(d.get("metadata") or {}),
            sources=[
                SourceGroup(str(s.get("name") or ""), s.get("entries") or [])
                for s in d.get("sources") or []
            ],
            save_project=bool(d.get("save_project", True)),
        )


def build_manifest(
    references: Iterable[ContentReference],
    package_name: str,
    *,
    source_name: str,
    author: str = "",
) -> ExportManifest:
    """
    Manifest with one source group named `source_name` holding every
    reference, in order.
    """
    manifest = ExportManifest.create(package_name, author)
    source = manifest.add_source(source_name)
    for reference in references:
        source.add_reference(reference)
    return manifest


__all__ = [
    "PackageMetadata",
    "SourceGroup",
    "ExportManifest",
    "build_manifest",
]
