"""
Core façade for QuickPackage.

QuickPackage is the single, high-level entrypoint used by:

    - the HTTP API (suggest a package name, build a package, download it)
    - scripts and tests

It wraps:

    - DB backend + pool
    - Account registry (users, read rules)
    - Content database
    - Reference collector + archive builder

Flow of create_package():

    1) resolve the selected item as the invoking user
    2) impersonate the elevated account and collect references
    3) build the archive (the builder impersonates again for the write)
    4) return the package path
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .config import QuickPackageConfig, load_config
from .content.database import ContentDatabase
from .content.models import ContentReference, Item
from .db import DBPool, SQLiteBackend
from .errors import PreconditionFailure
from .export.builder import ArchiveBuilder
from .export.collector import ReferenceCollector
from .naming import default_package_name, validate_package_name
from .security.accounts import AccountRegistry
from .security.context import SecurityContext, User
from .security.switcher import UserSwitcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageResult:
    path: str
    package_name: str
    references: List[ContentReference] = field(default_factory=list)


# ---------------------------------------------------------------------------
# QuickPackage façade
# ---------------------------------------------------------------------------

@dataclass
class QuickPackage:
    """
    High-level façade over the packaging flow.

    Attributes
    ----------
    config:
        QuickPackageConfig used to construct this instance.

    db_pool:
        DBPool that provides DBConnection objects on-demand.

    accounts:
        AccountRegistry holding users and read rules.

    database:
        ContentDatabase the packages are built from.

    collector, builder:
        The two halves of a package build.
    """

    config: QuickPackageConfig
    db_pool: DBPool
    accounts: AccountRegistry
    database: ContentDatabase
    collector: ReferenceCollector
    builder: ArchiveBuilder

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_config(
        cls,
        config: Optional[QuickPackageConfig] = None,
        *,
        init_schema: bool = True,
    ) -> "QuickPackage":
        cfg = config or load_config()

        if cfg.enable_logging:
            logging.basicConfig(level=logging.INFO)
            logger.info("Initializing QuickPackage with config: %s", cfg)

        backend = SQLiteBackend(cfg.db_uri)
        db_pool = DBPool(backend)

        if init_schema:
            conn = backend.connect()
            try:
                backend.init_schema(conn)
            finally:
                conn.close()

        accounts = AccountRegistry(db_pool)
        database = ContentDatabase(db_pool, accounts, name=cfg.database_name)

        return cls(
            config=cfg,
            db_pool=db_pool,
            accounts=accounts,
            database=database,
            collector=ReferenceCollector(database),
            builder=ArchiveBuilder(cfg, database, accounts),
        )

    @classmethod
    def from_env(cls, *, init_schema: bool = True) -> "QuickPackage":
        """Construct QuickPackage using environment variables."""
        return cls.from_config(load_config(), init_schema=init_schema)

    # ------------------------------------------------------------------
    # Contexts
    # ------------------------------------------------------------------

    def user_context(self, user_name: str) -> SecurityContext:
        """Context for an invoking user on the default site."""
        user = self.accounts.get_user(user_name)
        return SecurityContext(user, self.config.default_site)

    def elevated_user(self) -> User:
        return self.accounts.get_user(self.config.elevated_user)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def resolve_item(
        self,
        item_id: str,
        context: SecurityContext,
        *,
        language: Optional[str] = None,
        version: Optional[int] = None,
    ) -> Item:
        """
        Fetch the selected item or raise PreconditionFailure.
        """
        item = self.database.get_item(
            item_id, context, language=language, version=version
        )
        if item is None:
            raise PreconditionFailure(f"Item {item_id!r} not found")
        return item

    def suggest_package_name(
        self,
        item_id: str,
        user_name: str,
        *,
        language: Optional[str] = None,
        version: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> str:
        item = self.resolve_item(
            item_id, self.user_context(user_name), language=language, version=version
        )
        return default_package_name(item.name, self.config, now)

    # ------------------------------------------------------------------
    # Packaging
    # ------------------------------------------------------------------

    def create_package(
        self,
        *,
        item_id: str,
        user_name: str,
        language: Optional[str] = None,
        version: Optional[int] = None,
        package_name: Optional[str] = None,
        include_descendants: bool = False,
        output_dir: Optional[str] = None,
    ) -> PackageResult:
        """
        Package one item (and optionally its subtree) and return where
        the archive was written.

        The invoking user must be able to see the selected item. Reading
        the rest of the content happens as the elevated account, so
        descendants hidden from the user are still packaged.
        """
        user_ctx = self.user_context(user_name)
        root = self.resolve_item(item_id, user_ctx, language=language, version=version)

        name = validate_package_name(
            package_name or default_package_name(root.name, self.config)
        )

        logger.info(
            "Packaging %s for %s (descendants=%s)",
            root.path, user_ctx.user.name, include_descendants,
        )

        with UserSwitcher(self.elevated_user(), site=self.config.shell_site) as ctx:
            references = self.collector.collect(root, include_descendants, ctx)

        path = self.builder.build_archive(
            references,
            name,
            source_name=root.name,
            author=user_ctx.user.display_name,
            output_dir=output_dir,
        )
        return PackageResult(path=path, package_name=name, references=references)


# ---------------------------------------------------------------------------
# Convenience
# ---------------------------------------------------------------------------

def create_quickpackage(
    config: Optional[QuickPackageConfig] = None,
    *,
    init_schema: bool = True,
) -> QuickPackage:
    """
    Convenience constructor used by services / scripts.
    """
    return QuickPackage.from_config(config, init_schema=init_schema)


__all__ = [
    "PackageResult",
    "QuickPackage",
    "create_quickpackage",
]
