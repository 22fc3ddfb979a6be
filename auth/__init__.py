# Auth module for the InfluenceTie API
# Provides role-based access control and authentication dependencies

from auth.roles import (
    Permission,
    ROLE_PERMISSIONS,
    get_permissions_for_role,
    has_permission,
    has_any_permission,
    parse_user_type,
)

from auth.decorators import (
    AuthError,
    require_user_type,
    require_permission,
    get_user_type,
)

__all__ = [
    # Roles
    "Permission",
    "ROLE_PERMISSIONS",
    "get_permissions_for_role",
    "has_permission",
    "has_any_permission",
    "parse_user_type",

    # Decorators
    "AuthError",
    "require_user_type",
    "require_permission",
    "get_user_type",
]
