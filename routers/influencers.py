# Influencer Router for the InfluenceTie API
# Influencer directory for brands and rate-card management for influencers

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from auth.decorators import require_permission, require_user_type
from auth.dependencies import get_current_user
from auth.roles import Permission
from auth.utils import TokenData
from config.app_config import MAX_PAGE_LIMIT
from core.responses import success_response
from database.config import get_db
from database.models import User, UserType
from schemas.users import InfluencerFilters, RatesUpdate
from services.user_service import get_user_service

router = APIRouter(prefix="/influencers", tags=["Influencers"])


# ============================================================================
# DIRECTORY
# ============================================================================

@router.get("")
async def list_influencers(
    category: Optional[str] = None,
    min_followers: Optional[int] = Query(None, alias="minFollowers", ge=0),
    max_followers: Optional[int] = Query(None, alias="maxFollowers", ge=0),
    min_engagement: Optional[float] = Query(None, alias="minEngagement", ge=0),
    max_engagement: Optional[float] = Query(None, alias="maxEngagement", ge=0),
    location: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(25, ge=1, le=MAX_PAGE_LIMIT),
    db: Session = Depends(get_db),
    claims: TokenData = Depends(require_permission(Permission.BROWSE_INFLUENCERS)),
):
    """Search influencer accounts, most followed first."""
    filters = InfluencerFilters(
        category=category,
        min_followers=min_followers,
        max_followers=max_followers,
        min_engagement=min_engagement,
        max_engagement=max_engagement,
        location=location,
        page=page,
        limit=limit,
    )
    result = get_user_service(db).list_influencers(filters)
    return success_response("Influencers retrieved successfully", result)


@router.get("/{influencer_id}")
async def get_influencer(
    influencer_id: str,
    db: Session = Depends(get_db),
    claims: TokenData = Depends(require_permission(Permission.BROWSE_INFLUENCERS)),
):
    influencer = get_user_service(db).get_influencer(influencer_id)
    return success_response("Influencer retrieved successfully", {"influencer": influencer})


# ============================================================================
# RATES
# ============================================================================

@router.put("/me/rates")
async def update_rates(
    data: RatesUpdate,
    db: Session = Depends(get_db),
    claims: TokenData = Depends(require_user_type(UserType.INFLUENCER)),
    current_user: User = Depends(get_current_user),
):
    influencer = get_user_service(db).update_rates(current_user, data.rates)
    return success_response("Rates updated successfully", {"influencer": influencer})
