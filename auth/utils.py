# Authentication Utilities
# Password hashing, one-time codes, and signed identity tokens

from datetime import datetime, timedelta, timezone
from typing import Optional
import secrets

import bcrypt
from jose import jwt, JWTError
from pydantic import BaseModel

from config.app_config import (
    BCRYPT_ROUNDS,
    JWT_SECRET_KEY,
    JWT_ALGORITHM,
    JWT_EXPIRES_IN_DAYS,
    OTP_LENGTH,
    OTP_EXPIRY_MINUTES,
)
from database.models import utcnow


class TokenData(BaseModel):
    """Claims carried by an identity token."""
    account_id: str
    email: str
    role: str


# ============================================================================
# PASSWORDS
# ============================================================================

def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt using the configured work factor."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Check a password against a stored hash. Accounts without a hash never match."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


# ============================================================================
# ONE-TIME CODES
# ============================================================================

def generate_otp() -> str:
    """Six random digits, never starting with zero."""
    low = 10 ** (OTP_LENGTH - 1)
    return str(low + secrets.randbelow(9 * low))


def generate_otp_expiry(now: Optional[datetime] = None) -> datetime:
    return (now or utcnow()) + timedelta(minutes=OTP_EXPIRY_MINUTES)


def is_otp_expired(expiry: datetime, now: Optional[datetime] = None) -> bool:
    return (now or utcnow()) > expiry


# ============================================================================
# TOKENS
# ============================================================================

def create_access_token(account_id: str, email: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed token embedding the account id, email and role."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=JWT_EXPIRES_IN_DAYS))
    payload = {
        "userId": account_id,
        "email": email,
        "role": role,
        "exp": expire,
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[TokenData]:
    """Decode and validate a token. Returns None when the signature or expiry check fails."""
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None

    account_id = payload.get("userId")
    email = payload.get("email")
    role = payload.get("role")
    if not account_id or not email or not role:
        return None
    return TokenData(account_id=account_id, email=email, role=role)


def create_state_token(nonce: str, minutes: int = 10) -> str:
    """Short-lived signed value for the OAuth `state` round trip."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    return jwt.encode({"nonce": nonce, "purpose": "oauth_state", "exp": expire}, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_state_token(state: str) -> bool:
    try:
        payload = jwt.decode(state, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return False
    return payload.get("purpose") == "oauth_state"
