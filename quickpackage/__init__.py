"""
quickpackage

Export one item of a content tree, optionally with all its descendants,
into a single package archive, written as an elevated account so the
invoking user's read rights do not limit what gets packaged.

Submodules include:
    - content/   item tree, descendant queries
    - security/  accounts, read rules, impersonation
    - export/    manifest, collector, writer, builder, reader
    - db/        SQLite backend
    - api/       HTTP surface

The root package exports the config loader and the façade.
"""

from .config import QuickPackageConfig, load_config
from .core import PackageResult, QuickPackage, create_quickpackage

__all__ = [
    "QuickPackageConfig",
    "load_config",
    "PackageResult",
    "QuickPackage",
    "create_quickpackage",
]
