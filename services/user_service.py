# User Service for the InfluenceTie marketplace
# Profile management, account deletion, participation stats and the influencer directory

import logging

from sqlalchemy import String, cast, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from auth.utils import get_password_hash, verify_password
from core.errors import BadRequestError, ConflictError, ErrorCode, NotFoundError
from database.models import (
    Campaign,
    CampaignParticipant,
    CampaignStatusDB,
    ParticipantStatusDB,
    User,
    UserType,
    utcnow,
)
from schemas.responses import influencer_summary, user_to_response
from schemas.users import ChangePasswordRequest, InfluencerFilters, ProfileUpdate
from services.campaign_service import contains_ci

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Own profile
    # ------------------------------------------------------------------

    def get_profile(self, user: User) -> dict:
        return user_to_response(user)

    def update_profile(self, user: User, patch: ProfileUpdate) -> dict:
        changes = patch.changes()
        if not changes:
            raise BadRequestError("No fields to update", code=ErrorCode.NO_FIELDS)

        if changes.get("company_name") and user.role != UserType.BRAND:
            raise BadRequestError("Company name can only be set on brand accounts")

        handle = changes.get("instagram_handle")
        if handle and handle != user.instagram_handle:
            taken = self.db.query(User.id).filter(
                User.instagram_handle == handle, User.id != user.id
            ).first()
            if taken:
                raise ConflictError("Instagram handle is already taken", code=ErrorCode.INSTAGRAM_ALREADY_EXISTS)

        for column, value in changes.items():
            setattr(user, column, value)
        user.updated_at = utcnow()

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Instagram handle is already taken", code=ErrorCode.INSTAGRAM_ALREADY_EXISTS)
        self.db.refresh(user)

        return user_to_response(user)

    def change_password(self, user: User, data: ChangePasswordRequest) -> None:
        if not verify_password(data.current_password, user.password_hash):
            raise BadRequestError("Current password is incorrect", code=ErrorCode.INCORRECT_PASSWORD)

        user.password_hash = get_password_hash(data.new_password)
        user.updated_at = utcnow()
        self.db.commit()

    def delete_account(self, user: User) -> None:
        """Remove the account; owned campaigns and applications cascade."""
        account_id = user.id
        self.db.delete(user)
        self.db.commit()
        logger.info(f"Account {account_id} deleted")

    def get_stats(self, user: User) -> dict:
        if user.role == UserType.BRAND:
            rows = self.db.query(Campaign.status, func.count(Campaign.id)).filter(
                Campaign.brand_id == user.id
            ).group_by(Campaign.status).all()
            by_status = {s.value: 0 for s in CampaignStatusDB}
            by_status.update({status.value: count for status, count in rows})
            return {"campaigns": {"total": sum(by_status.values()), "byStatus": by_status}}

        rows = self.db.query(CampaignParticipant.status, func.count(CampaignParticipant.id)).filter(
            CampaignParticipant.influencer_id == user.id
        ).group_by(CampaignParticipant.status).all()
        by_status = {s.value: 0 for s in ParticipantStatusDB}
        by_status.update({status.value: count for status, count in rows})

        completed = self.db.query(func.count(CampaignParticipant.id)).filter(
            CampaignParticipant.influencer_id == user.id,
            CampaignParticipant.completed_at.isnot(None),
        ).scalar()
        earnings = self.db.query(func.coalesce(func.sum(CampaignParticipant.agreed_rate), 0)).filter(
            CampaignParticipant.influencer_id == user.id,
            CampaignParticipant.status == ParticipantStatusDB.ACCEPTED,
        ).scalar()

        return {
            "applications": {
                "total": sum(by_status.values()),
                "byStatus": by_status,
                "completed": completed,
            },
            "earnings": {"total": float(earnings or 0)},
        }

    # ------------------------------------------------------------------
    # Influencer directory
    # ------------------------------------------------------------------

    def list_influencers(self, filters: InfluencerFilters) -> dict:
        query = self.db.query(User).filter(User.role == UserType.INFLUENCER)

        if filters.category:
            # categories is a JSON list; match the quoted element in its text form
            escaped = filters.category.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            query = query.filter(cast(User.categories, String).ilike(f'%"{escaped}"%', escape="\\"))
        if filters.min_followers is not None:
            query = query.filter(User.followers_count >= filters.min_followers)
        if filters.max_followers is not None:
            query = query.filter(User.followers_count <= filters.max_followers)
        if filters.min_engagement is not None:
            query = query.filter(User.engagement_rate >= filters.min_engagement)
        if filters.max_engagement is not None:
            query = query.filter(User.engagement_rate <= filters.max_engagement)
        if filters.location:
            query = query.filter(contains_ci(User.location, filters.location))

        total = query.count()
        offset = (filters.page - 1) * filters.limit
        influencers = query.order_by(User.followers_count.desc(), User.id).offset(offset).limit(filters.limit).all()

        return {
            "influencers": [self._directory_entry(u) for u in influencers],
            "pagination": {
                "page": filters.page,
                "limit": filters.limit,
                "total": total,
                "pages": (total + filters.limit - 1) // filters.limit,
            },
        }

    def get_influencer(self, influencer_id: str) -> dict:
        user = self.db.query(User).filter(
            User.id == influencer_id, User.role == UserType.INFLUENCER
        ).first()
        if not user:
            raise NotFoundError("Influencer not found", code=ErrorCode.USER_NOT_FOUND)
        return self._directory_entry(user)

    def update_rates(self, user: User, rates: dict) -> dict:
        user.rates = rates
        user.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(user)
        return self._directory_entry(user)

    @staticmethod
    def _directory_entry(user: User) -> dict:
        entry = influencer_summary(user)
        # Directory listings do not expose contact details
        entry.pop("email", None)
        entry["location"] = user.location
        entry["avatar"] = user.avatar
        return entry


def get_user_service(db: Session) -> UserService:
    """Factory function to get a UserService instance."""
    return UserService(db)
