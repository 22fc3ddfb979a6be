# Users Router for the InfluenceTie API
# The caller's own profile, password change, account deletion and stats

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from auth.dependencies import get_current_user
from core.responses import success_response
from database.config import get_db
from database.models import User
from schemas.users import ChangePasswordRequest, ProfileUpdate
from services.user_service import get_user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me")
async def get_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = get_user_service(db).get_profile(current_user)
    return success_response("Profile retrieved successfully", {"user": profile})


@router.put("/me")
async def update_profile(
    patch: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = get_user_service(db).update_profile(current_user, patch)
    return success_response("Profile updated successfully", {"user": profile})


@router.delete("/me")
async def delete_account(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete the account together with its campaigns and applications."""
    get_user_service(db).delete_account(current_user)
    return success_response("Account deleted successfully")


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_user_service(db).change_password(current_user, data)
    return success_response("Password changed successfully")


@router.get("/stats")
async def get_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stats = get_user_service(db).get_stats(current_user)
    return success_response("Stats retrieved successfully", {"stats": stats})
