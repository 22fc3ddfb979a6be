# Schemas module for the InfluenceTie API
# Organizes all Pydantic schemas in a modular structure

from schemas.auth import (
    RegisterRequest,
    LoginRequest,
    OtpVerifyRequest,
    EmailRequest,
    PasswordResetConfirmRequest,
)

from schemas.campaigns import (
    ApplicationAction,
    CampaignCreate,
    CampaignUpdate,
    CampaignFilters,
    ApplicationCreate,
    ApplicationDecision,
)

from schemas.users import (
    ProfileUpdate,
    ChangePasswordRequest,
    RatesUpdate,
    InfluencerFilters,
)

__all__ = [
    # Auth
    "RegisterRequest",
    "LoginRequest",
    "OtpVerifyRequest",
    "EmailRequest",
    "PasswordResetConfirmRequest",

    # Campaign
    "ApplicationAction",
    "CampaignCreate",
    "CampaignUpdate",
    "CampaignFilters",
    "ApplicationCreate",
    "ApplicationDecision",

    # User
    "ProfileUpdate",
    "ChangePasswordRequest",
    "RatesUpdate",
    "InfluencerFilters",
]
