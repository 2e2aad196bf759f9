"""
quickpackage.export

Package building:

    - ExportManifest / SourceGroup : declarative package project
    - PackageWriter                : scoped ZIP writer session
    - generate_package             : manifest + items -> archive members
    - ReferenceCollector           : root (+ descendants) -> references
    - ArchiveBuilder               : references -> package file, under
                                     the elevated account
    - read_package                 : archive -> PackageContents
"""

from .manifest import ExportManifest, PackageMetadata, SourceGroup, build_manifest
from .writer import FORMAT_VERSION, InstallationContext, PackageWriter, WriterState
from .generator import generate_package
from .collector import ReferenceCollector
from .builder import ArchiveBuilder
from .reader import PackageContents, read_package

__all__ = [
    # Manifest
    "ExportManifest",
    "PackageMetadata",
    "SourceGroup",
    "build_manifest",

    # Writer
    "FORMAT_VERSION",
    "InstallationContext",
    "PackageWriter",
    "WriterState",
    "generate_package",

    # Build flow
    "ReferenceCollector",
    "ArchiveBuilder",

    # Reading
    "PackageContents",
    "read_package",
]
