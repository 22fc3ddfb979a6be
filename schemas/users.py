# Pydantic Schemas for Profiles and the Influencer Directory

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.app_config import MAX_PAGE_LIMIT
from schemas.auth import INSTAGRAM_HANDLE_PATTERN, check_password_strength


# Request field -> users column. Anything not listed here is rejected by the schema.
PROFILE_FIELD_COLUMNS = {
    "first_name": "first_name",
    "last_name": "last_name",
    "bio": "bio",
    "website": "website",
    "location": "location",
    "instagram_handle": "instagram_handle",
    "company_name": "company_name",
    "industry": "industry",
    "categories": "categories",
    "rates": "rates",
    "preferences": "preferences",
}


def _positive_rates(value: Optional[Dict[str, Decimal]]):
    if value is None:
        return value
    for name, amount in value.items():
        if amount <= 0:
            raise ValueError(f"Rate for '{name}' must be positive")
    return {name: float(amount) for name, amount in value.items()}


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    first_name: Optional[str] = Field(None, alias="firstName", min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, alias="lastName", min_length=1, max_length=50)
    bio: Optional[str] = Field(None, max_length=1000)
    website: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    instagram_handle: Optional[str] = Field(None, alias="instagramHandle", pattern=INSTAGRAM_HANDLE_PATTERN)
    company_name: Optional[str] = Field(None, alias="companyName", max_length=255)
    industry: Optional[str] = Field(None, max_length=100)
    categories: Optional[List[str]] = None
    rates: Optional[Dict[str, Decimal]] = None
    preferences: Optional[Dict[str, Any]] = None

    @field_validator("website")
    @classmethod
    def website_scheme(cls, v):
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("Website must be a valid URL")
        return v

    @field_validator("rates")
    @classmethod
    def rates_positive(cls, v):
        return _positive_rates(v)

    def changes(self) -> Dict[str, Any]:
        provided = self.model_dump(exclude_unset=True)
        return {PROFILE_FIELD_COLUMNS[k]: v for k, v in provided.items()}


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword")

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, v):
        return check_password_strength(v)


class RatesUpdate(BaseModel):
    rates: Dict[str, Decimal]

    @field_validator("rates")
    @classmethod
    def rates_positive(cls, v):
        return _positive_rates(v)


class InfluencerFilters(BaseModel):
    category: Optional[str] = None
    min_followers: Optional[int] = Field(None, ge=0)
    max_followers: Optional[int] = Field(None, ge=0)
    min_engagement: Optional[float] = Field(None, ge=0)
    max_engagement: Optional[float] = Field(None, ge=0)
    location: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: int = Field(25, ge=1, le=MAX_PAGE_LIMIT)
