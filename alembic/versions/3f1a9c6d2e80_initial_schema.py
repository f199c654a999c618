"""Initial schema: categories, leads, videos, activity logs, roles, MFA factors, sales grid

Revision ID: 3f1a9c6d2e80
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c6d2e80'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


LOOKUP_TABLES = ('chat_locations', 'sale_statuses', 'lead_sources', 'designers')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('categories',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('color', sa.String(7), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('leads',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('twitter_handle', sa.String(255), nullable=False),
        sa.Column('profile_image_url', sa.Text(), nullable=True),
        sa.Column('follower_count', sa.Integer(), server_default='0'),
        sa.Column('last_post_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_verified', sa.Boolean(), server_default=sa.false()),
        sa.Column('is_blue_verified', sa.Boolean(), server_default=sa.false()),
        sa.Column('category_id', sa.String(36), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'],
                                name='leads_category_id_fkey', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_leads_category_id', 'leads', ['category_id'])
    op.create_index('ix_leads_created_at', 'leads', ['created_at'])

    op.create_table('videos',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('filename', sa.Text(), nullable=False),
        sa.Column('filepath', sa.Text(), nullable=False),
        sa.Column('filesize', sa.BigInteger(), nullable=False),
        sa.Column('mime_type', sa.Text(), nullable=False),
        sa.Column('thumbnail_url', sa.Text(), nullable=True),
        sa.Column('upload_status', sa.Text(), server_default='processing'),
        sa.Column('category_id', sa.String(36), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('filepath'),
    )
    op.create_index('ix_videos_category_id', 'videos', ['category_id'])

    op.create_table('user_activity_logs',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('action', sa.Text(), nullable=False),
        sa.Column('object_type', sa.Text(), nullable=True),
        sa.Column('object_id', sa.Text(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.Text(), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_user_activity_logs_user_id', 'user_activity_logs', ['user_id'])
    op.create_index('ix_user_activity_logs_action', 'user_activity_logs', ['action'])
    op.create_index('ix_user_activity_logs_created_at', 'user_activity_logs', ['created_at'])

    op.create_table('user_roles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('role', sa.String(16), nullable=False, server_default='user'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table('mfa_factors',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('friendly_name', sa.Text(), nullable=True),
        sa.Column('factor_type', sa.String(16), nullable=False, server_default='totp'),
        sa.Column('secret', sa.Text(), nullable=False),
        sa.Column('status', sa.String(16), nullable=False, server_default='unverified'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_mfa_factors_user_id', 'mfa_factors', ['user_id'])

    # -- Sales grid --
    for table in LOOKUP_TABLES:
        op.create_table(table,
            sa.Column('id', sa.String(36), nullable=False),
            sa.Column('name', sa.Text(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('name'),
        )

    op.create_table('sales_records',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('client', sa.Text(), nullable=False, server_default=''),
        sa.Column('chat_location_id', sa.String(36), nullable=True),
        sa.Column('sale_status_id', sa.String(36), nullable=True),
        sa.Column('lead_source_id', sa.String(36), nullable=True),
        sa.Column('designer_id', sa.String(36), nullable=True),
        sa.Column('product', sa.Text(), nullable=True),
        sa.Column('est_deal_value', sa.Float(), nullable=True),
        sa.Column('est_payout', sa.Float(), nullable=True),
        sa.Column('est_earnings', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['chat_location_id'], ['chat_locations.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['sale_status_id'], ['sale_statuses.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['lead_source_id'], ['lead_sources.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['designer_id'], ['designers.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('sales_records')
    for table in reversed(LOOKUP_TABLES):
        op.drop_table(table)
    op.drop_index('ix_mfa_factors_user_id', 'mfa_factors')
    op.drop_table('mfa_factors')
    op.drop_table('user_roles')
    op.drop_index('ix_user_activity_logs_created_at', 'user_activity_logs')
    op.drop_index('ix_user_activity_logs_action', 'user_activity_logs')
    op.drop_index('ix_user_activity_logs_user_id', 'user_activity_logs')
    op.drop_table('user_activity_logs')
    op.drop_index('ix_videos_category_id', 'videos')
    op.drop_table('videos')
    op.drop_index('ix_leads_created_at', 'leads')
    op.drop_index('ix_leads_category_id', 'leads')
    op.drop_table('leads')
    op.drop_table('categories')
