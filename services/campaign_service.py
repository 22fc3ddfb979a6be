# Campaign Service for the InfluenceTie marketplace
# Campaign CRUD, applications, and the brand's accept/reject decisions

import logging
from typing import Dict, Iterable

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from auth.roles import Permission, has_permission, parse_user_type
from auth.utils import TokenData
from core.errors import (
    BadRequestError,
    ConflictError,
    ErrorCode,
    ForbiddenError,
    Messages,
    NotFoundError,
    ValidationAppError,
)
from database.models import (
    Campaign,
    CampaignParticipant,
    CampaignStatusDB,
    ParticipantStatusDB,
    utcnow,
)
from schemas.campaigns import (
    ApplicationAction,
    ApplicationDecision,
    CampaignCreate,
    CampaignFilters,
    CampaignUpdate,
)
from schemas.responses import campaign_to_response, participant_to_response

logger = logging.getLogger(__name__)


def contains_ci(column, text: str):
    """Case-insensitive substring match with LIKE wildcards in the input escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


def is_unique_violation(error: IntegrityError) -> bool:
    text = str(error.orig).lower()
    return "unique" in text or "duplicate key" in text


class CampaignService:
    """
    Campaign lifecycle and application workflow.
    Callers are identified by their token claims only.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Campaigns
    # ------------------------------------------------------------------

    def create_campaign(self, caller: TokenData, data: CampaignCreate) -> dict:
        if not self._can(caller, Permission.CREATE_CAMPAIGNS):
            raise ForbiddenError("Only brands can create campaigns")

        if data.end_date <= data.start_date:
            raise BadRequestError("End date must be after start date", code=ErrorCode.INVALID_DATE_RANGE)

        campaign = Campaign(
            brand_id=caller.account_id,
            title=data.title,
            description=data.description,
            budget=data.budget,
            category=data.category,
            requirements=data.requirements,
            start_date=data.start_date,
            end_date=data.end_date,
            requirements_json=data.requirements_json,
            target_audience=data.target_audience,
            content_guidelines=data.content_guidelines,
            status=CampaignStatusDB.DRAFT,
        )
        self.db.add(campaign)
        self.db.commit()
        self.db.refresh(campaign)
        logger.info(f"Campaign {campaign.id} created by brand {caller.account_id}")

        return campaign_to_response(campaign, {"applicationsCount": 0})

    def list_campaigns(self, caller: TokenData, filters: CampaignFilters) -> dict:
        query = self.db.query(Campaign).options(joinedload(Campaign.brand))

        # Brands see their own campaigns; everyone else sees ACTIVE ones
        if self._can(caller, Permission.MANAGE_OWN_CAMPAIGNS):
            query = query.filter(Campaign.brand_id == caller.account_id)
        else:
            query = query.filter(Campaign.status == CampaignStatusDB.ACTIVE)

        if filters.status:
            query = query.filter(Campaign.status == filters.status)
        if filters.category:
            query = query.filter(contains_ci(Campaign.category, filters.category))
        if filters.min_budget is not None:
            query = query.filter(Campaign.budget >= filters.min_budget)
        if filters.max_budget is not None:
            query = query.filter(Campaign.budget <= filters.max_budget)
        if filters.search:
            query = query.filter(or_(
                contains_ci(Campaign.title, filters.search),
                contains_ci(Campaign.description, filters.search),
            ))

        total = query.count()
        offset = (filters.page - 1) * filters.limit
        campaigns = query.order_by(Campaign.created_at.desc()).offset(offset).limit(filters.limit).all()
        counts = self._application_counts(c.id for c in campaigns)

        return {
            "campaigns": [
                campaign_to_response(c, {"applicationsCount": counts.get(c.id, 0)})
                for c in campaigns
            ],
            "pagination": {
                "page": filters.page,
                "limit": filters.limit,
                "total": total,
                "pages": (total + filters.limit - 1) // filters.limit,
            },
        }

    def get_campaign(self, caller: TokenData, campaign_id: str) -> dict:
        campaign = self.db.query(Campaign).options(joinedload(Campaign.brand)).filter(
            Campaign.id == campaign_id
        ).first()
        if not campaign:
            raise NotFoundError(Messages.CAMPAIGN_NOT_FOUND, code=ErrorCode.CAMPAIGN_NOT_FOUND)

        is_owner = campaign.brand_id == caller.account_id
        own_application = self.db.query(CampaignParticipant).filter(
            CampaignParticipant.campaign_id == campaign.id,
            CampaignParticipant.influencer_id == caller.account_id,
        ).first()

        # Non-ACTIVE campaigns do not exist for anyone but the owner and existing applicants
        if not is_owner and campaign.status != CampaignStatusDB.ACTIVE and own_application is None:
            raise NotFoundError(Messages.CAMPAIGN_NOT_FOUND, code=ErrorCode.CAMPAIGN_NOT_FOUND)

        applications_count = self.db.query(func.count(CampaignParticipant.id)).filter(
            CampaignParticipant.campaign_id == campaign.id
        ).scalar()

        return campaign_to_response(campaign, {
            "brandEmail": campaign.brand.email if campaign.brand else None,
            "applicationsCount": applications_count,
            "acceptedCount": self._accepted_count(campaign.id),
            "isOwner": is_owner,
            "userApplication": {
                "id": own_application.id,
                "status": own_application.status.value,
                "proposedRate": own_application.proposed_rate,
                "appliedAt": own_application.applied_at,
            } if own_application else None,
        })

    def update_campaign(self, caller: TokenData, campaign_id: str, patch: CampaignUpdate) -> dict:
        campaign = self._get_owned_campaign(caller, campaign_id, "update")

        changes = patch.changes()
        if not changes:
            raise BadRequestError("No fields to update", code=ErrorCode.NO_FIELDS)

        cleared = patch.cleared_required_fields()
        if cleared:
            raise ValidationAppError(cleared)

        start = changes.get("start_date", campaign.start_date)
        end = changes.get("end_date", campaign.end_date)
        if end <= start:
            raise BadRequestError("End date must be after start date", code=ErrorCode.INVALID_DATE_RANGE)

        for column, value in changes.items():
            setattr(campaign, column, value)
        campaign.updated_at = utcnow()

        self.db.commit()
        self.db.refresh(campaign)

        return campaign_to_response(campaign, {"applicationsCount": self._application_counts([campaign.id]).get(campaign.id, 0)})

    def delete_campaign(self, caller: TokenData, campaign_id: str) -> None:
        campaign = self._get_owned_campaign(caller, campaign_id, "delete")

        if campaign.status == CampaignStatusDB.ACTIVE and self._accepted_count(campaign.id) > 0:
            raise BadRequestError(
                "Cannot delete active campaign with accepted participants",
                code=ErrorCode.CAMPAIGN_HAS_PARTICIPANTS,
            )

        # Participant rows go with it via ON DELETE CASCADE
        self.db.delete(campaign)
        self.db.commit()
        logger.info(f"Campaign {campaign_id} deleted by brand {caller.account_id}")

    # ------------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------------

    def apply_to_campaign(self, caller: TokenData, campaign_id: str, proposed_rate=None) -> dict:
        if not self._can(caller, Permission.APPLY_TO_CAMPAIGNS):
            raise ForbiddenError("Only influencers can apply to campaigns")

        campaign = self.db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if not campaign:
            raise NotFoundError(Messages.CAMPAIGN_NOT_FOUND, code=ErrorCode.CAMPAIGN_NOT_FOUND)

        if campaign.status != CampaignStatusDB.ACTIVE:
            raise BadRequestError("Campaign is not accepting applications", code=ErrorCode.CAMPAIGN_NOT_ACTIVE)

        if campaign.end_date < utcnow():
            raise BadRequestError("Campaign has expired", code=ErrorCode.CAMPAIGN_EXPIRED)

        existing = self.db.query(CampaignParticipant.id).filter(
            CampaignParticipant.campaign_id == campaign_id,
            CampaignParticipant.influencer_id == caller.account_id,
        ).first()
        if existing:
            raise ConflictError("You have already applied to this campaign", code=ErrorCode.ALREADY_APPLIED)

        application = CampaignParticipant(
            campaign_id=campaign_id,
            influencer_id=caller.account_id,
            proposed_rate=proposed_rate,
            status=ParticipantStatusDB.INVITED,
            applied_at=utcnow(),
        )
        self.db.add(application)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e):
                raise ConflictError("You have already applied to this campaign", code=ErrorCode.ALREADY_APPLIED)
            raise
        self.db.refresh(application)

        return participant_to_response(application)

    def list_applications(self, caller: TokenData, campaign_id: str) -> list:
        if not self._can(caller, Permission.REVIEW_APPLICATIONS):
            raise ForbiddenError("Only brands can review applications")
        self._get_owned_campaign(caller, campaign_id, "view applications for")

        applications = self.db.query(CampaignParticipant).options(
            joinedload(CampaignParticipant.influencer)
        ).filter(
            CampaignParticipant.campaign_id == campaign_id
        ).order_by(CampaignParticipant.applied_at.desc()).all()

        return [participant_to_response(a, include_influencer=True) for a in applications]

    def decide_application(
        self,
        caller: TokenData,
        campaign_id: str,
        application_id: str,
        decision: ApplicationDecision,
    ) -> dict:
        if not self._can(caller, Permission.REVIEW_APPLICATIONS):
            raise ForbiddenError("Only brands can review applications")
        self._get_owned_campaign(caller, campaign_id, "manage applications for")

        application = self.db.query(CampaignParticipant).filter(
            CampaignParticipant.id == application_id,
            CampaignParticipant.campaign_id == campaign_id,
        ).first()
        if not application:
            raise NotFoundError(Messages.APPLICATION_NOT_FOUND, code=ErrorCode.APPLICATION_NOT_FOUND)

        if decision.action == ApplicationAction.ACCEPT:
            if application.status != ParticipantStatusDB.INVITED:
                raise BadRequestError(
                    f"Application is already {application.status.value.lower()}",
                    code=ErrorCode.APPLICATION_ALREADY_DECIDED,
                )
            application.status = ParticipantStatusDB.ACCEPTED
            application.accepted_at = utcnow()
            application.agreed_rate = decision.proposed_rate or application.proposed_rate
        else:
            # An accepted participant may still be released; a rejection is final
            if application.status == ParticipantStatusDB.REJECTED:
                raise BadRequestError(
                    "Application is already rejected",
                    code=ErrorCode.APPLICATION_ALREADY_DECIDED,
                )
            application.status = ParticipantStatusDB.REJECTED
            application.accepted_at = None
            application.agreed_rate = None

        self.db.commit()
        self.db.refresh(application)
        logger.info(f"Application {application_id} on campaign {campaign_id}: {application.status.value}")

        return participant_to_response(application)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _can(caller: TokenData, permission: Permission) -> bool:
        try:
            return has_permission(parse_user_type(caller.role), permission)
        except ValueError:
            return False

    def _get_owned_campaign(self, caller: TokenData, campaign_id: str, action: str) -> Campaign:
        campaign = self.db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if not campaign:
            raise NotFoundError(Messages.CAMPAIGN_NOT_FOUND, code=ErrorCode.CAMPAIGN_NOT_FOUND)
        if campaign.brand_id != caller.account_id:
            raise ForbiddenError(f"You can only {action} your own campaigns")
        return campaign

    def _accepted_count(self, campaign_id: str) -> int:
        return self.db.query(func.count(CampaignParticipant.id)).filter(
            CampaignParticipant.campaign_id == campaign_id,
            CampaignParticipant.status == ParticipantStatusDB.ACCEPTED,
        ).scalar()

    def _application_counts(self, campaign_ids: Iterable[str]) -> Dict[str, int]:
        ids = list(campaign_ids)
        if not ids:
            return {}
        rows = self.db.query(
            CampaignParticipant.campaign_id, func.count(CampaignParticipant.id)
        ).filter(
            CampaignParticipant.campaign_id.in_(ids)
        ).group_by(CampaignParticipant.campaign_id).all()
        return {campaign_id: count for campaign_id, count in rows}


def get_campaign_service(db: Session) -> CampaignService:
    """Factory function to get a CampaignService instance."""
    return CampaignService(db)
