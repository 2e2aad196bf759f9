"""
Package generator.

Walks a manifest and writes the archive members through an initialized
PackageWriter:

    installer/version                      format version
    installer/context                      InstallationContext (user, site)
    installer/project                      manifest JSON (if save_project)
    metadata/sc_<field>                    one text member per metadata field
    items/<db><path>/<id>/<lang>/<ver>/item.json
                                           one payload per reference

Payloads are read through the content database with the writer's
security context, in source order then entry order.
"""

from __future__ import annotations

import logging

from ..content.database import ContentDatabase
from ..content.models import ContentReference, Item
from ..security.context import SecurityContext
from .manifest import ExportManifest
from .writer import FORMAT_VERSION, PackageWriter

logger = logging.getLogger(__name__)


def item_entry_name(item: Item) -> str:
    return (
        f"items/{item.database}{item.path}/{item.item_id}"
        f"/{item.language}/{item.version}/item.json"
    )


def item_payload(item: Item, source_name: str) -> dict:
    return {
        "id": item.item_id,
        "name": item.name,
        "path": item.path,
        "parent_id": item.parent_id,
        "template": item.template,
        "sort_order": item.sort_order,
        "database": item.database,
        "language": item.language,
        "version": item.version,
        "source": source_name,
        "fields": item.fields,
    }


def generate_package(
    manifest: ExportManifest,
    writer: PackageWriter,
    database: ContentDatabase,
    context: SecurityContext,
) -> int:
    """
    Serialize `manifest` and every referenced item into `writer`.

    Returns the number of item payloads written.

    Raises
    ------
    LookupError
        A referenced item no longer exists or is not readable.
    """
    installation = writer.installation
    if installation is None:
        raise RuntimeError("Package writer has not been initialized")

    writer.put_entry("installer/version", str(FORMAT_VERSION))
    writer.put_json("installer/context", installation.to_dict())

    if manifest.save_project:
        writer.put_json("installer/project", manifest.to_dict())

    for key, value in manifest.metadata.to_dict().items():
        if key in ("package_name", "author") or value:
            name = "name" if key == "package_name" else key
            writer.put_entry(f"metadata/sc_{name}", str(value or ""))

    written = 0
    for source in manifest.sources:
        for entry in source:
            ref = ContentReference.from_token(entry)
            item = database.get_item(
                ref.item_id,
                context,
                language=ref.language,
                version=ref.version or None,
            )
            if item is None:
                raise LookupError(f"Referenced item is not available: {entry}")

            writer.put_json(item_entry_name(item), item_payload(item, source.name))
            written += 1

        logger.info("Source %r: %d item(s) packaged", source.name, len(source))

    return written


__all__ = [
    "generate_package",
    "item_entry_name",
    "item_payload",
]
