# Response shaping for accounts, campaigns and applications
# Explicit column -> response-key tables; credentials and one-time codes never leave here

from typing import Any, Dict, Optional

from database.models import User, Campaign, CampaignParticipant


def _value(v):
    return v.value if hasattr(v, "value") else v


USER_RESPONSE_FIELDS = {
    "id": "id",
    "email": "email",
    "first_name": "firstName",
    "last_name": "lastName",
    "role": "role",
    "phone": "phone",
    "avatar": "avatar",
    "is_email_verified": "isEmailVerified",
    "is_phone_verified": "isPhoneVerified",
    "bio": "bio",
    "website": "website",
    "location": "location",
    "company_name": "companyName",
    "industry": "industry",
    "instagram_handle": "instagramHandle",
    "followers_count": "followersCount",
    "engagement_rate": "engagementRate",
    "categories": "categories",
    "rates": "rates",
    "preferences": "preferences",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
    "last_login_at": "lastLoginAt",
}

INFLUENCER_SUMMARY_FIELDS = {
    "id": "id",
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "instagram_handle": "instagramHandle",
    "followers_count": "followersCount",
    "engagement_rate": "engagementRate",
    "categories": "categories",
    "bio": "bio",
    "rates": "rates",
}

CAMPAIGN_RESPONSE_FIELDS = {
    "id": "id",
    "brand_id": "brandId",
    "title": "title",
    "description": "description",
    "budget": "budget",
    "category": "category",
    "requirements": "requirements",
    "requirements_json": "requirementsJson",
    "target_audience": "targetAudience",
    "content_guidelines": "contentGuidelines",
    "start_date": "startDate",
    "end_date": "endDate",
    "status": "status",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}

PARTICIPANT_RESPONSE_FIELDS = {
    "id": "id",
    "campaign_id": "campaignId",
    "influencer_id": "influencerId",
    "proposed_rate": "proposedRate",
    "agreed_rate": "agreedRate",
    "status": "status",
    "applied_at": "appliedAt",
    "accepted_at": "acceptedAt",
    "completed_at": "completedAt",
}


def _project(obj, fields: Dict[str, str]) -> Dict[str, Any]:
    return {key: _value(getattr(obj, column)) for column, key in fields.items()}


def user_to_response(user: User) -> Dict[str, Any]:
    return _project(user, USER_RESPONSE_FIELDS)


def influencer_summary(user: User) -> Dict[str, Any]:
    return _project(user, INFLUENCER_SUMMARY_FIELDS)


def campaign_to_response(campaign: Campaign, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    data = _project(campaign, CAMPAIGN_RESPONSE_FIELDS)
    brand = campaign.brand
    data["brandName"] = brand.full_name if brand else None
    data["companyName"] = brand.company_name if brand else None
    if extra:
        data.update(extra)
    return data


def participant_to_response(participant: CampaignParticipant, include_influencer: bool = False) -> Dict[str, Any]:
    data = _project(participant, PARTICIPANT_RESPONSE_FIELDS)
    if include_influencer and participant.influencer is not None:
        data["influencer"] = influencer_summary(participant.influencer)
    return data
