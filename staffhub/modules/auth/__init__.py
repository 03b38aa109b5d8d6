# Authentication module

from staffhub.modules.auth.dependencies import (
    get_current_user,
    get_current_admin,
    get_staff_or_admin,
    require_admin,
    resolve_identity,
)

__all__ = [
    "get_current_user",
    "get_current_admin",
    "get_staff_or_admin",
    "require_admin",
    "resolve_identity",
]
