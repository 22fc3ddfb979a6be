# FastAPI Server for the InfluenceTie marketplace
# Brands publish campaigns, influencers apply, brands pick participants

import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.app_config import CORS_ORIGINS, ENVIRONMENT, LOG_LEVEL
from core.responses import register_exception_handlers
from database.config import init_db
from routers import auth_router, campaigns_router, influencers_router, users_router

# Configure Logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

app = FastAPI(
    title="InfluenceTie API",
    description="Brand and influencer campaign marketplace API",
    version=API_VERSION,
)


@app.on_event("startup")
def startup_event():
    # Tables are created if missing; schema changes go through Alembic
    init_db()
    logger.info(f"InfluenceTie API started ({ENVIRONMENT})")


# Wildcard origins cannot be combined with credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


# ============================================================================
# API ROUTERS (v1)
# ============================================================================
app.include_router(auth_router, prefix="/api/v1")
app.include_router(campaigns_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(influencers_router, prefix="/api/v1")


@app.get("/")
def root():
    return {
        "message": "InfluenceTie API",
        "version": API_VERSION,
        "status": "running"
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
