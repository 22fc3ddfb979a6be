# Pydantic Schemas for Campaigns and Applications

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.app_config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from database.models import CampaignStatusDB


class ApplicationAction(str, Enum):
    ACCEPT = "ACCEPT"
    REJECT = "REJECT"


def to_naive_utc(value):
    """Accept ISO date or datetime strings; store everything as naive UTC."""
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError("Invalid date, expected ISO 8601")
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Request field -> column. Anything not listed here is rejected by the schema.
CAMPAIGN_FIELD_COLUMNS = {
    "title": "title",
    "description": "description",
    "category": "category",
    "requirements": "requirements",
    "start_date": "start_date",
    "end_date": "end_date",
    "requirements_json": "requirements_json",
    "target_audience": "target_audience",
    "content_guidelines": "content_guidelines",
    "status": "status",
}

# Columns a partial update may clear with an explicit null
NULLABLE_CAMPAIGN_COLUMNS = {"requirements", "requirements_json", "target_audience", "content_guidelines"}


class CampaignCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    budget: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    category: str = Field(..., min_length=1, max_length=100)
    requirements: Optional[str] = None
    start_date: datetime = Field(..., alias="startDate")
    end_date: datetime = Field(..., alias="endDate")
    requirements_json: Optional[Dict[str, Any]] = Field(None, alias="requirementsJson")
    target_audience: Optional[Dict[str, Any]] = Field(None, alias="targetAudience")
    content_guidelines: Optional[Dict[str, Any]] = Field(None, alias="contentGuidelines")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class CampaignUpdate(BaseModel):
    """Partial update. Budget is fixed at creation and is not accepted here."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    requirements: Optional[str] = None
    start_date: Optional[datetime] = Field(None, alias="startDate")
    end_date: Optional[datetime] = Field(None, alias="endDate")
    requirements_json: Optional[Dict[str, Any]] = Field(None, alias="requirementsJson")
    target_audience: Optional[Dict[str, Any]] = Field(None, alias="targetAudience")
    content_guidelines: Optional[Dict[str, Any]] = Field(None, alias="contentGuidelines")
    status: Optional[CampaignStatusDB] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)

    def changes(self) -> Dict[str, Any]:
        """Provided fields mapped to their column names, explicit nulls included."""
        provided = self.model_dump(exclude_unset=True)
        return {CAMPAIGN_FIELD_COLUMNS[k]: v for k, v in provided.items()}

    def cleared_required_fields(self) -> Dict[str, List[str]]:
        provided = self.model_dump(exclude_unset=True)
        return {
            (type(self).model_fields[k].alias or k): ["This field cannot be null"]
            for k, v in provided.items()
            if v is None and CAMPAIGN_FIELD_COLUMNS[k] not in NULLABLE_CAMPAIGN_COLUMNS
        }


class CampaignFilters(BaseModel):
    status: Optional[CampaignStatusDB] = None
    category: Optional[str] = None
    min_budget: Optional[Decimal] = Field(None, gt=0)
    max_budget: Optional[Decimal] = Field(None, gt=0)
    search: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT)


class ApplicationCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    proposed_rate: Optional[Decimal] = Field(None, alias="proposedRate", gt=0, max_digits=12, decimal_places=2)


class ApplicationDecision(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: ApplicationAction
    proposed_rate: Optional[Decimal] = Field(None, alias="proposedRate", gt=0, max_digits=12, decimal_places=2)
