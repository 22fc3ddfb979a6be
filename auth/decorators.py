# Authorization Dependencies for the InfluenceTie API
# Role gates expressed as FastAPI dependencies

from fastapi import Depends

from auth.dependencies import get_current_claims
from auth.roles import Permission, has_any_permission, parse_user_type
from auth.utils import TokenData
from core.errors import ForbiddenError
from database.models import UserType


class AuthError(ForbiddenError):
    """Raised when an authenticated caller lacks the required role or permission."""


def require_user_type(*allowed_types: UserType):
    """
    Dependency that requires the caller to be one of the specified types.

    Usage:
        @router.put("/me/rates")
        async def update_rates(
            claims: TokenData = Depends(require_user_type(UserType.INFLUENCER))
        ):
            ...
    """
    async def dependency(claims: TokenData = Depends(get_current_claims)) -> TokenData:
        if get_user_type(claims) not in allowed_types:
            allowed_names = ", ".join(t.value for t in allowed_types)
            raise AuthError(f"This endpoint requires user type: {allowed_names}")
        return claims

    return dependency


def require_permission(*permissions: Permission):
    """
    Dependency that requires the caller to hold any of the given permissions.

    Usage:
        @router.get("")
        async def list_influencers(
            claims: TokenData = Depends(require_permission(Permission.BROWSE_INFLUENCERS))
        ):
            ...
    """
    async def dependency(claims: TokenData = Depends(get_current_claims)) -> TokenData:
        if not has_any_permission(get_user_type(claims), list(permissions)):
            raise AuthError("You don't have permission to perform this action")
        return claims

    return dependency


def get_user_type(claims: TokenData) -> UserType:
    """Extract UserType from token claims; unknown roles get no permissions."""
    try:
        return parse_user_type(claims.role)
    except ValueError:
        raise AuthError("Unknown account role")
