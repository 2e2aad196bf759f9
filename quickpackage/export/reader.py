"""
Read a package archive back into memory.

Only the members this package format defines are interpreted; anything
else in the archive is ignored. Member names that are absolute or climb
out of the archive root ("../") are skipped.
"""

from __future__ import annotations

import json
import posixpath
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .manifest import ExportManifest


@dataclass
class PackageContents:
    format_version: int
    manifest: Optional[ExportManifest]
    metadata: Dict[str, str] = field(default_factory=dict)
    installation: Dict[str, Any] = field(default_factory=dict)
    items: List[Dict[str, Any]] = field(default_factory=list)
    item_entries: List[str] = field(default_factory=list)


def _is_safe(name: str) -> bool:
    if not name or name.endswith("/") or name.startswith("/"):
        return False
    normalized = posixpath.normpath(name)
    return not (normalized == ".." or normalized.startswith("../"))


def read_package(path: Union[str, Path]) -> PackageContents:
    """
    Parse a package archive.

    Raises
    ------
    zipfile.BadZipFile
        The file is not a ZIP archive.
    ValueError
        The archive has no installer/version member.
    """
    with zipfile.ZipFile(path, "r") as zf:
        names = [n for n in zf.namelist() if _is_safe(n)]
        if "installer/version" not in names:
            raise ValueError(f"{path} is not a package archive")

        contents = PackageContents(
            format_version=int(zf.read("installer/version").decode("utf-8").strip()),
            manifest=None,
        )

        if "installer/project" in names:
            contents.manifest = ExportManifest.from_dict(
                json.loads(zf.read("installer/project").decode("utf-8"))
            )
        if "installer/context" in names:
            contents.installation = json.loads(zf.read("installer/context").decode("utf-8"))

        for name in names:
            if name.startswith("metadata/sc_"):
                key = name[len("metadata/sc_"):]
                contents.metadata[key] = zf.read(name).decode("utf-8")
            elif name.startswith("items/") and name.endswith("/item.json"):
                contents.item_entries.append(name)
                contents.items.append(json.loads(zf.read(name).decode("utf-8")))

    return contents


__all__ = [
    "PackageContents",
    "read_package",
]
