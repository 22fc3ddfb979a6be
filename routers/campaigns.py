# Campaigns Router for the InfluenceTie API
# Brands publish campaigns; influencers apply; brands accept or reject applications

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from auth.dependencies import get_current_claims
from auth.utils import TokenData
from config.app_config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from core.responses import success_response
from database.config import get_db
from database.models import CampaignStatusDB
from schemas.campaigns import (
    ApplicationCreate,
    ApplicationDecision,
    CampaignCreate,
    CampaignFilters,
    CampaignUpdate,
)
from services.campaign_service import get_campaign_service

router = APIRouter(prefix="/campaigns", tags=["Campaigns"])


# ============================================================================
# CAMPAIGNS
# ============================================================================

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_campaign(
    campaign_data: CampaignCreate,
    db: Session = Depends(get_db),
    claims: TokenData = Depends(get_current_claims),
):
    """Create a DRAFT campaign owned by the calling brand."""
    campaign = get_campaign_service(db).create_campaign(claims, campaign_data)
    return success_response("Campaign created successfully", {"campaign": campaign}, status.HTTP_201_CREATED)


@router.get("")
async def list_campaigns(
    status_filter: Optional[CampaignStatusDB] = Query(None, alias="status"),
    category: Optional[str] = None,
    min_budget: Optional[Decimal] = Query(None, alias="minBudget", gt=0),
    max_budget: Optional[Decimal] = Query(None, alias="maxBudget", gt=0),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    db: Session = Depends(get_db),
    claims: TokenData = Depends(get_current_claims),
):
    """
    Brands see their own campaigns in every status.
    Influencers and admins see ACTIVE campaigns only.
    """
    filters = CampaignFilters(
        status=status_filter,
        category=category,
        min_budget=min_budget,
        max_budget=max_budget,
        search=search,
        page=page,
        limit=limit,
    )
    result = get_campaign_service(db).list_campaigns(claims, filters)
    return success_response("Campaigns retrieved successfully", result)


@router.get("/{campaign_id}")
async def get_campaign(
    campaign_id: str,
    db: Session = Depends(get_db),
    claims: TokenData = Depends(get_current_claims),
):
    campaign = get_campaign_service(db).get_campaign(claims, campaign_id)
    return success_response("Campaign retrieved successfully", {"campaign": campaign})


@router.put("/{campaign_id}")
async def update_campaign(
    campaign_id: str,
    patch: CampaignUpdate,
    db: Session = Depends(get_db),
    claims: TokenData = Depends(get_current_claims),
):
    campaign = get_campaign_service(db).update_campaign(claims, campaign_id, patch)
    return success_response("Campaign updated successfully", {"campaign": campaign})


@router.delete("/{campaign_id}")
async def delete_campaign(
    campaign_id: str,
    db: Session = Depends(get_db),
    claims: TokenData = Depends(get_current_claims),
):
    get_campaign_service(db).delete_campaign(claims, campaign_id)
    return success_response("Campaign deleted successfully")


# ============================================================================
# APPLICATIONS
# ============================================================================

@router.post("/{campaign_id}/apply", status_code=status.HTTP_201_CREATED)
async def apply_to_campaign(
    campaign_id: str,
    application: Optional[ApplicationCreate] = None,
    db: Session = Depends(get_db),
    claims: TokenData = Depends(get_current_claims),
):
    proposed_rate = application.proposed_rate if application else None
    result = get_campaign_service(db).apply_to_campaign(claims, campaign_id, proposed_rate)
    return success_response("Application submitted successfully", {"application": result}, status.HTTP_201_CREATED)


@router.get("/{campaign_id}/applications")
async def list_applications(
    campaign_id: str,
    db: Session = Depends(get_db),
    claims: TokenData = Depends(get_current_claims),
):
    applications = get_campaign_service(db).list_applications(claims, campaign_id)
    return success_response("Applications retrieved successfully", {"applications": applications})


@router.put("/{campaign_id}/applications/{application_id}")
async def decide_application(
    campaign_id: str,
    application_id: str,
    decision: ApplicationDecision,
    db: Session = Depends(get_db),
    claims: TokenData = Depends(get_current_claims),
):
    """Accept or reject an application on one of the caller's campaigns."""
    result = get_campaign_service(db).decide_application(claims, campaign_id, application_id, decision)
    verb = "accepted" if result["status"] == "ACCEPTED" else "rejected"
    return success_response(f"Application {verb} successfully", {"application": result})
