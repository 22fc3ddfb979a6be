# Database Models for the InfluenceTie Marketplace

from sqlalchemy import (
    Column, String, Integer, Float, Numeric, DateTime, ForeignKey, Text, JSON,
    Enum, Boolean, UniqueConstraint, Index
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
from datetime import datetime, timezone
import uuid
import enum

Base = declarative_base()

def generate_uuid():
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _enum_values(enum_cls):
    return [e.value for e in enum_cls]


# Enums
class UserType(str, enum.Enum):
    INFLUENCER = "INFLUENCER"
    BRAND = "BRAND"
    ADMIN = "ADMIN"


class CampaignStatusDB(str, enum.Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ParticipantStatusDB(str, enum.Enum):
    INVITED = "INVITED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class OtpPurpose(str, enum.Enum):
    EMAIL_VERIFICATION = "EMAIL_VERIFICATION"
    PASSWORD_RESET = "PASSWORD_RESET"


# Models
class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=True)  # NULL for Google-only accounts
    phone = Column(String(20), unique=True, nullable=True)
    role = Column(
        Enum(UserType, values_callable=_enum_values, name="usertype"),
        nullable=False,
        default=UserType.INFLUENCER
    )
    first_name = Column(String(50))
    last_name = Column(String(50))

    # Verification
    is_email_verified = Column(Boolean, default=False, nullable=False)
    is_phone_verified = Column(Boolean, default=False, nullable=False)
    otp = Column(String(6), nullable=True)
    otp_expiry = Column(DateTime, nullable=True)
    otp_purpose = Column(Enum(OtpPurpose, values_callable=_enum_values, name="otppurpose"), nullable=True)

    # Delegated identity
    google_id = Column(String(255), unique=True, nullable=True)
    avatar = Column(String(500))

    # Profile
    bio = Column(Text)
    website = Column(String(255))
    location = Column(String(255))
    preferences = Column(JSON)

    # Brand fields
    company_name = Column(String(255))
    industry = Column(String(100))

    # Influencer fields
    instagram_handle = Column(String(30), unique=True, nullable=True)
    followers_count = Column(Integer, default=0)
    engagement_rate = Column(Float, default=0.0)
    categories = Column(JSON)  # ["fashion", "travel"]
    rates = Column(JSON)  # {"post": 5000, "reel": 8000}

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    last_login_at = Column(DateTime)

    # Relationships
    campaigns = relationship("Campaign", back_populates="brand", cascade="all, delete-orphan", passive_deletes=True)
    applications = relationship(
        "CampaignParticipant", back_populates="influencer", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    brand_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    budget = Column(Numeric(12, 2), nullable=False)
    category = Column(String(100), nullable=False)
    requirements = Column(Text)

    # Structured briefs, stored as opaque documents
    requirements_json = Column(JSON)
    target_audience = Column(JSON)
    content_guidelines = Column(JSON)

    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    status = Column(
        Enum(CampaignStatusDB, values_callable=_enum_values, name="campaignstatus"),
        nullable=False,
        default=CampaignStatusDB.DRAFT
    )

    created_at = Column(DateTime, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    brand = relationship("User", back_populates="campaigns")
    participants = relationship(
        "CampaignParticipant", back_populates="campaign", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        Index("ix_campaigns_status", "status"),
    )


class CampaignParticipant(Base):
    """An influencer's application to a campaign."""
    __tablename__ = "campaign_participants"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False)
    influencer_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    proposed_rate = Column(Numeric(12, 2), nullable=True)
    agreed_rate = Column(Numeric(12, 2), nullable=True)
    status = Column(
        Enum(ParticipantStatusDB, values_callable=_enum_values, name="participantstatus"),
        nullable=False,
        default=ParticipantStatusDB.INVITED
    )
    applied_at = Column(DateTime, default=utcnow, nullable=False)
    accepted_at = Column(DateTime)
    completed_at = Column(DateTime)

    # Relationships
    campaign = relationship("Campaign", back_populates="participants")
    influencer = relationship("User", back_populates="applications")

    __table_args__ = (
        UniqueConstraint("campaign_id", "influencer_id", name="uq_campaign_participant"),
    )
