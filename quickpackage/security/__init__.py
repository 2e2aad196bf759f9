"""
quickpackage.security

Identity and permission layer:

    - User / SecurityContext : explicit acting identity + site
    - AccountRegistry        : users and per-item read rules
    - UserSwitcher           : scoped impersonation
"""

from .context import User, SecurityContext
from .accounts import AccountRegistry, is_readable
from .switcher import UserSwitcher

__all__ = [
    "User",
    "SecurityContext",
    "AccountRegistry",
    "is_readable",
    "UserSwitcher",
]
