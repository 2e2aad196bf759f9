"""
Impersonation scope.

    with UserSwitcher(admin, site="shell") as ctx:
        database.get_item(uri, ctx)

The scope yields a fresh elevated SecurityContext and revokes it on exit,
whether the block succeeded or raised. Nothing outside the block is
modified, so the caller's own context is exactly what it was before.
"""

from __future__ import annotations

import logging
from typing import Optional

from .context import SecurityContext, User

logger = logging.getLogger(__name__)


class UserSwitcher:
    def __init__(self, user: User, *, site: str):
        self.user = user
        self.site = site
        self.context: Optional[SecurityContext] = None

    @property
    def active(self) -> bool:
        return self.context is not None and self.context.active

    def __enter__(self) -> SecurityContext:
        if self.context is not None:
            raise RuntimeError("UserSwitcher is not reentrant")
        self.context = SecurityContext(self.user, self.site)
        logger.debug("Impersonating %s on site %s", self.user.name, self.site)
        return self.context

    def __exit__(self, exc_type, exc, tb):
        if self.context is not None:
            self.context.revoke()
            logger.debug("Impersonation of %s ended", self.user.name)
        return False


__all__ = [
    "UserSwitcher",
]
