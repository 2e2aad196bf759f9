"""
Explicit security context.

A SecurityContext is handed to every content read and to the package
writer. It names the acting user and the site whose rules apply. There
is no process-wide "current user": whoever needs an identity gets one
passed in, so concurrent builds cannot observe each other's identity.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    name: str
    full_name: str = ""
    is_admin: bool = False

    @property
    def display_name(self) -> str:
        return self.full_name or self.name


class SecurityContext:
    """
    Acting user + site.

    A context can be revoked (the impersonation scope does this on exit);
    a revoked context refuses to authorize any further reads.
    """

    def __init__(self, user: User, site: str):
        self.user = user
        self.site = site
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def revoke(self) -> None:
        self._active = False

    def ensure_active(self) -> None:
        if not self._active:
            raise PermissionError(
                f"Security context for {self.user.name!r} has been revoked"
            )

    def __repr__(self) -> str:
        state = "active" if self._active else "revoked"
        return f"SecurityContext(user={self.user.name!r}, site={self.site!r}, {state})"


__all__ = [
    "User",
    "SecurityContext",
]
