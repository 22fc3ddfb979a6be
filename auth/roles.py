# Role-Based Access Control for the InfluenceTie marketplace
# This module defines the permissions each account role carries

from enum import Enum
from typing import List, Set

from database.models import UserType


class Permission(str, Enum):
    """Fine-grained permissions for the platform."""

    # Brand permissions
    CREATE_CAMPAIGNS = "create_campaigns"
    MANAGE_OWN_CAMPAIGNS = "manage_own_campaigns"
    REVIEW_APPLICATIONS = "review_applications"
    BROWSE_INFLUENCERS = "browse_influencers"

    # Influencer permissions
    APPLY_TO_CAMPAIGNS = "apply_to_campaigns"
    EDIT_RATES = "edit_rates"

    # Common permissions
    VIEW_CAMPAIGNS = "view_campaigns"
    UPDATE_PROFILE = "update_profile"


# Role to permissions mapping
ROLE_PERMISSIONS: dict[UserType, Set[Permission]] = {
    UserType.BRAND: {
        Permission.CREATE_CAMPAIGNS,
        Permission.MANAGE_OWN_CAMPAIGNS,
        Permission.REVIEW_APPLICATIONS,
        Permission.BROWSE_INFLUENCERS,
        # Common
        Permission.VIEW_CAMPAIGNS,
        Permission.UPDATE_PROFILE,
    },

    UserType.INFLUENCER: {
        Permission.APPLY_TO_CAMPAIGNS,
        Permission.EDIT_RATES,
        # Common
        Permission.VIEW_CAMPAIGNS,
        Permission.UPDATE_PROFILE,
    },

    UserType.ADMIN: {
        Permission.VIEW_CAMPAIGNS,
        Permission.UPDATE_PROFILE,
        Permission.BROWSE_INFLUENCERS,
    },
}


def get_permissions_for_role(user_type: UserType) -> Set[Permission]:
    """Get all permissions for a given user type."""
    return ROLE_PERMISSIONS.get(user_type, set())


def has_permission(user_type: UserType, permission: Permission) -> bool:
    """Check if a user type has a specific permission."""
    return permission in get_permissions_for_role(user_type)


def has_any_permission(user_type: UserType, permissions: List[Permission]) -> bool:
    """Check if a user type has any of the given permissions."""
    user_permissions = get_permissions_for_role(user_type)
    return any(p in user_permissions for p in permissions)


def parse_user_type(value) -> UserType:
    """Coerce a stored or token-carried role into UserType."""
    raw = value.value if hasattr(value, "value") else str(value)
    return UserType(raw.upper())
