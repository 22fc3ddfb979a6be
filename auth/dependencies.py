# Authentication Dependencies for the InfluenceTie API
# Resolve the caller from the bearer token on every request; there is no server-side session

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from auth.utils import TokenData, decode_access_token
from core.errors import UnauthorizedError, ErrorCode, Messages
from database.config import get_db
from database.models import User


security = HTTPBearer(auto_error=False)


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenData:
    """
    Validate the bearer token and return its claims.
    This is the core authentication dependency.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(Messages.AUTH_REQUIRED)

    token_data = decode_access_token(credentials.credentials)
    if token_data is None:
        raise UnauthorizedError(Messages.INVALID_TOKEN, code=ErrorCode.INVALID_TOKEN)

    return token_data


async def get_current_user(
    claims: TokenData = Depends(get_current_claims),
    db: Session = Depends(get_db)
) -> User:
    """Load the account row behind the token claims."""
    user = db.query(User).filter(User.id == claims.account_id).first()
    if user is None:
        raise UnauthorizedError(Messages.USER_NOT_FOUND, code=ErrorCode.USER_NOT_FOUND)

    return user

