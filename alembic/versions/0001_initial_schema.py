"""Initial InfluenceTie schema

This migration creates:
1. users table (brands, influencers and admins in one table)
2. campaigns table
3. campaign_participants table (applications)

Uniqueness on email, phone, instagram_handle and (campaign_id, influencer_id)
is enforced here so concurrent duplicate requests fail at the database.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


USER_TYPES = ('INFLUENCER', 'BRAND', 'ADMIN')
OTP_PURPOSES = ('EMAIL_VERIFICATION', 'PASSWORD_RESET')
CAMPAIGN_STATUSES = ('DRAFT', 'ACTIVE', 'PAUSED', 'COMPLETED', 'CANCELLED')
PARTICIPANT_STATUSES = ('INVITED', 'ACCEPTED', 'REJECTED')


def upgrade():
    # 1. users
    op.create_table('users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('role', sa.Enum(*USER_TYPES, name='usertype'), nullable=False),
        sa.Column('first_name', sa.String(50)),
        sa.Column('last_name', sa.String(50)),

        # Verification
        sa.Column('is_email_verified', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('is_phone_verified', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('otp', sa.String(6), nullable=True),
        sa.Column('otp_expiry', sa.DateTime, nullable=True),
        sa.Column('otp_purpose', sa.Enum(*OTP_PURPOSES, name='otppurpose'), nullable=True),

        # Delegated identity
        sa.Column('google_id', sa.String(255), nullable=True),
        sa.Column('avatar', sa.String(500)),

        # Profile
        sa.Column('bio', sa.Text),
        sa.Column('website', sa.String(255)),
        sa.Column('location', sa.String(255)),
        sa.Column('preferences', sa.JSON),
        sa.Column('company_name', sa.String(255)),
        sa.Column('industry', sa.String(100)),
        sa.Column('instagram_handle', sa.String(30), nullable=True),
        sa.Column('followers_count', sa.Integer, server_default='0'),
        sa.Column('engagement_rate', sa.Float, server_default='0'),
        sa.Column('categories', sa.JSON),
        sa.Column('rates', sa.JSON),

        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('last_login_at', sa.DateTime),

        sa.UniqueConstraint('phone', name='uq_users_phone'),
        sa.UniqueConstraint('google_id', name='uq_users_google_id'),
        sa.UniqueConstraint('instagram_handle', name='uq_users_instagram_handle'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # 2. campaigns
    op.create_table('campaigns',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('brand_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('budget', sa.Numeric(12, 2), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('requirements', sa.Text),
        sa.Column('requirements_json', sa.JSON),
        sa.Column('target_audience', sa.JSON),
        sa.Column('content_guidelines', sa.JSON),
        sa.Column('start_date', sa.DateTime, nullable=False),
        sa.Column('end_date', sa.DateTime, nullable=False),
        sa.Column('status', sa.Enum(*CAMPAIGN_STATUSES, name='campaignstatus'), nullable=False, server_default='DRAFT'),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_campaigns_brand_id', 'campaigns', ['brand_id'])
    op.create_index('ix_campaigns_status', 'campaigns', ['status'])

    # 3. campaign_participants
    op.create_table('campaign_participants',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('campaign_id', sa.String(36), sa.ForeignKey('campaigns.id', ondelete='CASCADE'), nullable=False),
        sa.Column('influencer_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('proposed_rate', sa.Numeric(12, 2), nullable=True),
        sa.Column('agreed_rate', sa.Numeric(12, 2), nullable=True),
        sa.Column('status', sa.Enum(*PARTICIPANT_STATUSES, name='participantstatus'), nullable=False, server_default='INVITED'),
        sa.Column('applied_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('accepted_at', sa.DateTime),
        sa.Column('completed_at', sa.DateTime),
        sa.UniqueConstraint('campaign_id', 'influencer_id', name='uq_campaign_participant'),
    )


def downgrade():
    op.drop_table('campaign_participants')
    op.drop_index('ix_campaigns_status', table_name='campaigns')
    op.drop_index('ix_campaigns_brand_id', table_name='campaigns')
    op.drop_table('campaigns')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    # PostgreSQL keeps enum types around after the tables are gone
    bind = op.get_bind()
    for name in ('participantstatus', 'campaignstatus', 'otppurpose', 'usertype'):
        sa.Enum(name=name).drop(bind, checkfirst=True)
