# API Routers Module
# Exports all API routers mounted under /api/v1

from routers.auth import router as auth_router
from routers.campaigns import router as campaigns_router
from routers.users import router as users_router
from routers.influencers import router as influencers_router

__all__ = [
    'auth_router',
    'campaigns_router',
    'users_router',
    'influencers_router',
]
