"""
Global configuration settings for QuickPackage.

This module centralizes configuration for:

    - the content database location and logical name
    - the data folder packages are written under
    - the elevated account and site used while packaging
    - overwrite behaviour and default package naming
    - feature flags (logging, etc.)

It provides:
    QuickPackageConfig  – structured config object
    load_config()       – load from environment variables or defaults
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path


@dataclass
class QuickPackageConfig:
    """
    Canonical configuration for the packaging subsystem.

    Attributes
    ----------
    db_uri:
        Path to the SQLite content database file.

    database_name:
        Logical name of the content database ("master"). Recorded in
        every content reference token and in archive item paths.

    data_folder:
        Configured data root. Packages are written to
        ``<data_folder>/packages/<package name>``.

    elevated_user:
        Account impersonated while collecting and writing a package.

    shell_site / default_site:
        The administrative site the writer runs under, and the site
        that is in effect outside of a package build.

    overwrite_existing:
        When False, building a package whose file already exists fails
        with PackageExistsError instead of replacing it.

    package_name_format / timestamp_format:
        Default package file name, formatted with ``name`` (item name)
        and ``timestamp`` (strftime of ``timestamp_format``).

    enable_logging:
        Whether to enable internal INFO logging.
    """

    db_uri: str = "quickpackage.db"
    database_name: str = "master"
    data_folder: str = "./data"

    elevated_user: str = "sitecore\\admin"
    shell_site: str = "shell"
    default_site: str = "website"

    overwrite_existing: bool = True

    package_name_format: str = "{name}-{timestamp}.zip"
    timestamp_format: str = "%Y-%m-%d--%H-%M-%S"

    enable_logging: bool = False

    @property
    def packages_dir(self) -> Path:
        return Path(self.data_folder) / "packages"


def load_config() -> QuickPackageConfig:
    """
    Load QuickPackageConfig from environment variables, falling back to defaults.

    Recognized variables:
        QUICKPACKAGE_DB_URI            (path to the SQLite file)
        QUICKPACKAGE_DATABASE          (logical database name)
        QUICKPACKAGE_DATA_FOLDER       (directory path)
        QUICKPACKAGE_ELEVATED_USER     (account name)
        QUICKPACKAGE_SHELL_SITE        (site name)
        QUICKPACKAGE_DEFAULT_SITE      (site name)
        QUICKPACKAGE_OVERWRITE         ("true" / "false" / "1" / "0")
        QUICKPACKAGE_NAME_FORMAT       (str.format pattern)
        QUICKPACKAGE_TIMESTAMP_FORMAT  (strftime pattern)
        QUICKPACKAGE_ENABLE_LOGGING    ("true" / "false" / "1" / "0")

    Returns
    -------
    QuickPackageConfig
    """

    def _env_flag(name: str, default: bool) -> bool:
        val = os.getenv(name)
        if val is None:
            return default
        return val.strip().lower() in ("1", "true", "yes", "on")

    defaults = QuickPackageConfig()

    return QuickPackageConfig(
        db_uri=os.getenv("QUICKPACKAGE_DB_URI", defaults.db_uri),
        database_name=os.getenv("QUICKPACKAGE_DATABASE", defaults.database_name),
        data_folder=os.getenv("QUICKPACKAGE_DATA_FOLDER", defaults.data_folder),

        elevated_user=os.getenv(
            "QUICKPACKAGE_ELEVATED_USER",
            defaults.elevated_user,
        ),
        shell_site=os.getenv("QUICKPACKAGE_SHELL_SITE", defaults.shell_site),
        default_site=os.getenv("QUICKPACKAGE_DEFAULT_SITE", defaults.default_site),

        overwrite_existing=_env_flag(
            "QUICKPACKAGE_OVERWRITE",
            default=defaults.overwrite_existing,
        ),

        package_name_format=os.getenv(
            "QUICKPACKAGE_NAME_FORMAT",
            defaults.package_name_format,
        ),
        timestamp_format=os.getenv(
            "QUICKPACKAGE_TIMESTAMP_FORMAT",
            defaults.timestamp_format,
        ),

        enable_logging=_env_flag(
            "QUICKPACKAGE_ENABLE_LOGGING",
            default=False,
        ),
    )
