# Services Module for the InfluenceTie API
# Contains business logic services

from services.account_service import AccountService, get_account_service
from services.campaign_service import CampaignService, get_campaign_service
from services.identity_service import IdentityService, get_identity_service
from services.user_service import UserService, get_user_service

__all__ = [
    'AccountService',
    'get_account_service',
    'CampaignService',
    'get_campaign_service',
    'IdentityService',
    'get_identity_service',
    'UserService',
    'get_user_service',
]
