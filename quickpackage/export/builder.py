"""
ArchiveBuilder - turns a reference list into a package file on disk.

Steps, in order:

    1) build the manifest (one source group, every reference in order)
    2) compute <data_folder>/packages/<package_name>
    3) impersonate the configured elevated account under the shell site
    4) open a PackageWriter, initialize it, run the generator
    5) close the writer (always), end the impersonation (always)
    6) return the absolute package path

An existing file at the target path is replaced unless the configuration
disables overwriting.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from ..config import QuickPackageConfig
from ..content.database import ContentDatabase
from ..content.models import ContentReference
from ..errors import PackageExistsError, QuickPackageError, WriteFailure
from ..naming import validate_package_name
from ..security.accounts import AccountRegistry
from ..security.switcher import UserSwitcher
from .generator import generate_package
from .manifest import build_manifest
from .writer import InstallationContext, PackageWriter

logger = logging.getLogger(__name__)


class ArchiveBuilder:
    """
    Parameters
    ----------
    config :
        Supplies data_folder, elevated_user, shell_site and
        overwrite_existing.
    database, accounts :
        Content database read by the generator, and the registry the
        elevated account is loaded from.
    writer_factory, generator :
        Collaborators used for the write; replaceable in tests.
    """

    def __init__(
        self,
        config: QuickPackageConfig,
        database: ContentDatabase,
        accounts: AccountRegistry,
        *,
        writer_factory: Callable[[Path], PackageWriter] = PackageWriter,
        generator: Callable[..., int] = generate_package,
    ):
        self.config = config
        self.database = database
        self.accounts = accounts
        self.writer_factory = writer_factory
        self.generator = generator

    def package_path(
        self,
        package_name: str,
        output_dir: Optional[Union[str, Path]] = None,
    ) -> Path:
        base = Path(output_dir) if output_dir is not None else self.config.packages_dir
        return (base / validate_package_name(package_name)).resolve()

    def build_archive(
        self,
        references: Iterable[ContentReference],
        package_name: str,
        *,
        source_name: str,
        author: str = "",
        output_dir: Optional[Union[str, Path]] = None,
    ) -> str:
        """
        Write a package containing `references` and return its path.

        Raises
        ------
        InvalidPackageName
            `package_name` is not a single file name.
        PackageExistsError
            The target exists and overwriting is disabled.
        AccountNotFound
            The elevated account is not registered.
        WriteFailure
            Writing or generating failed. The writer has been closed and
            the incomplete file removed.
        """
        path = self.package_path(package_name, output_dir)
        manifest = build_manifest(
            references,
            validate_package_name(package_name),
            source_name=source_name,
            author=author,
        )

        if path.exists() and not self.config.overwrite_existing:
            raise PackageExistsError(f"Package {path.name!r} already exists")

        elevated = self.accounts.get_user(self.config.elevated_user)

        with UserSwitcher(elevated, site=self.config.shell_site) as context:
            writer = self.writer_factory(path)
            try:
                with writer:
                    writer.initialize(InstallationContext.create(context))
                    written = self.generator(manifest, writer, self.database, context)
            except QuickPackageError:
                raise
            except Exception as exc:
                logger.exception("Package %s failed", path.name)
                raise WriteFailure(f"Failed to write package {path.name!r}: {exc}") from exc

        logger.info(
            "Package %s written: %d item(s), author=%r",
            path, written, author,
        )
        return str(path)


__all__ = [
    "ArchiveBuilder",
]
