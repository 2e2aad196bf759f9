"""
Package file naming.

Default names embed the item name and a timestamp, so two packages of
the same item only collide when built within the same second:

    Home-2024-05-01--14-03-27.zip
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .config import QuickPackageConfig
from .errors import InvalidPackageName

_FORBIDDEN_CHARS = set('/\\:*?"<>|\0')


def default_package_name(
    item_name: str,
    config: Optional[QuickPackageConfig] = None,
    now: Optional[datetime] = None,
) -> str:
    cfg = config or QuickPackageConfig()
    now = now or datetime.now()
    return cfg.package_name_format.format(
        name=item_name,
        timestamp=now.strftime(cfg.timestamp_format),
    )


def validate_package_name(name: str) -> str:
    """
    Return `name` stripped of surrounding whitespace, or raise
    InvalidPackageName if it is not usable as a single file name.
    """
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidPackageName("Package name must not be empty")
    if cleaned in (".", ".."):
        raise InvalidPackageName(f"Invalid package name: {name!r}")
    bad = sorted(set(cleaned) & _FORBIDDEN_CHARS)
    if bad:
        raise InvalidPackageName(
            f"Package name {name!r} contains forbidden characters: {''.join(bad)!r}"
        )
    return cleaned


__all__ = [
    "default_package_name",
    "validate_package_name",
]
