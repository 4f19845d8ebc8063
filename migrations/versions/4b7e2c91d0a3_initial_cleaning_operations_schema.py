"""initial_cleaning_operations_schema

Revision ID: 4b7e2c91d0a3
Revises:
Create Date: 2025-01-06 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b7e2c91d0a3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('business_id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('pay_type', sa.String(20), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint(
            "role IN ('super_manager', 'manager', 'cleaner')", name='ck_users_role'
        ),
        sa.CheckConstraint(
            "pay_type IS NULL OR pay_type IN ('hourly', 'per_job')",
            name='ck_users_pay_type',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )
    op.create_index('ix_users_business_id', 'users', ['business_id'])

    op.create_table(
        'properties',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('business_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('latitude', sa.Numeric(10, 7), nullable=True),
        sa.Column('longitude', sa.Numeric(10, 7), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_properties'),
    )
    op.create_index('ix_properties_business_id', 'properties', ['business_id'])

    op.create_table(
        'cleaning_jobs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('business_id', sa.Uuid(), nullable=False),
        sa.Column('property_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='available'),
        sa.Column('assigned_cleaner_id', sa.Uuid(), nullable=True),
        sa.Column('cleaning_date', sa.Date(), nullable=True),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('pay_type_override', sa.String(20), nullable=True),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('gps_start_lat', sa.Numeric(10, 7), nullable=True),
        sa.Column('gps_start_lng', sa.Numeric(10, 7), nullable=True),
        sa.Column('gps_end_lat', sa.Numeric(10, 7), nullable=True),
        sa.Column('gps_end_lng', sa.Numeric(10, 7), nullable=True),
        sa.Column('access_denied', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            'gps_conflict_resolved', sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column(
            'photo_conflict_resolved', sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column('overridden_by', sa.Uuid(), nullable=True),
        sa.Column('override_reason', sa.Text(), nullable=True),
        sa.Column('overridden_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('override_status', sa.String(20), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('available', 'accepted', 'in_progress', 'completed', 'needs_review')",
            name='ck_cleaning_jobs_status',
        ),
        sa.CheckConstraint(
            "status = 'available' OR assigned_cleaner_id IS NOT NULL",
            name='ck_cleaning_jobs_assigned_unless_available',
        ),
        sa.CheckConstraint(
            "status <> 'available' OR assigned_cleaner_id IS NULL",
            name='ck_cleaning_jobs_unassigned_when_available',
        ),
        sa.CheckConstraint('price >= 0', name='ck_cleaning_jobs_price_non_negative'),
        sa.CheckConstraint(
            "pay_type_override IS NULL OR pay_type_override IN ('hourly', 'per_job')",
            name='ck_cleaning_jobs_pay_type_override',
        ),
        sa.CheckConstraint(
            "(overridden_by IS NULL AND override_reason IS NULL"
            " AND overridden_at IS NULL AND override_status IS NULL)"
            " OR (overridden_by IS NOT NULL AND override_reason IS NOT NULL"
            " AND length(trim(override_reason)) > 0 AND overridden_at IS NOT NULL"
            " AND override_status IN ('completed', 'needs_review'))",
            name='ck_cleaning_jobs_override_complete',
        ),
        sa.ForeignKeyConstraint(
            ['property_id'], ['properties.id'],
            name='fk_cleaning_jobs_property_id_properties',
        ),
        sa.ForeignKeyConstraint(
            ['assigned_cleaner_id'], ['users.id'],
            name='fk_cleaning_jobs_assigned_cleaner_id_users',
        ),
        sa.ForeignKeyConstraint(
            ['overridden_by'], ['users.id'],
            name='fk_cleaning_jobs_overridden_by_users',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_cleaning_jobs'),
    )
    op.create_index('ix_cleaning_jobs_property_id', 'cleaning_jobs', ['property_id'])
    op.create_index(
        'idx_cleaning_jobs_business_status', 'cleaning_jobs', ['business_id', 'status']
    )
    op.create_index(
        'idx_cleaning_jobs_cleaner_status', 'cleaning_jobs', ['assigned_cleaner_id', 'status']
    )

    op.create_table(
        'invoices',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('business_id', sa.Uuid(), nullable=False),
        sa.Column('cleaner_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='open'),
        sa.Column('invoice_cycle', sa.String(20), nullable=False, server_default='bi_weekly'),
        sa.Column('pay_type', sa.String(20), nullable=False),
        sa.Column('period_start', sa.DateTime(timezone=True), nullable=False),
        sa.Column('period_end', sa.DateTime(timezone=True), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('open', 'submitted', 'approved', 'paid')",
            name='ck_invoices_status',
        ),
        sa.CheckConstraint('total_amount >= 0', name='ck_invoices_total_non_negative'),
        sa.CheckConstraint('period_end >= period_start', name='ck_invoices_period_order'),
        sa.ForeignKeyConstraint(
            ['cleaner_id'], ['users.id'], name='fk_invoices_cleaner_id_users'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_invoices'),
    )
    op.create_index('ix_invoices_business_id', 'invoices', ['business_id'])
    op.create_index('idx_invoices_cleaner_status', 'invoices', ['cleaner_id', 'status'])
    # At most one open invoice per cleaner
    op.create_index(
        'uq_invoices_one_open_per_cleaner',
        'invoices',
        ['cleaner_id'],
        unique=True,
        postgresql_where=sa.text("status = 'open'"),
        sqlite_where=sa.text("status = 'open'"),
    )

    op.create_table(
        'invoice_line_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('invoice_id', sa.Uuid(), nullable=False),
        sa.Column('job_id', sa.Uuid(), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('pay_type', sa.String(20), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('is_voided', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('void_reason', sa.Text(), nullable=True),
        sa.Column('voided_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('voided_by', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('amount >= 0', name='ck_invoice_line_items_amount_non_negative'),
        sa.CheckConstraint(
            'is_voided = false OR (void_reason IS NOT NULL AND voided_at IS NOT NULL)',
            name='ck_invoice_line_items_void_requires_reason',
        ),
        sa.ForeignKeyConstraint(
            ['invoice_id'], ['invoices.id'],
            name='fk_invoice_line_items_invoice_id_invoices',
        ),
        sa.ForeignKeyConstraint(
            ['job_id'], ['cleaning_jobs.id'],
            name='fk_invoice_line_items_job_id_cleaning_jobs',
        ),
        sa.ForeignKeyConstraint(
            ['voided_by'], ['users.id'],
            name='fk_invoice_line_items_voided_by_users',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_invoice_line_items'),
        sa.UniqueConstraint('invoice_id', 'job_id', name='uq_line_item_invoice_job'),
    )
    op.create_index('ix_invoice_line_items_invoice_id', 'invoice_line_items', ['invoice_id'])
    op.create_index('ix_invoice_line_items_job_id', 'invoice_line_items', ['job_id'])

    op.create_table(
        'media',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('job_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(10), nullable=False),
        sa.Column('uri', sa.Text(), nullable=False),
        sa.Column('room', sa.String(100), nullable=True),
        sa.Column('uploaded_by', sa.Uuid(), nullable=True),
        sa.Column('is_voided', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.CheckConstraint("type IN ('photo', 'video')", name='ck_media_type'),
        sa.ForeignKeyConstraint(
            ['job_id'], ['cleaning_jobs.id'], name='fk_media_job_id_cleaning_jobs'
        ),
        sa.ForeignKeyConstraint(
            ['uploaded_by'], ['users.id'], name='fk_media_uploaded_by_users'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_media'),
    )
    op.create_index('ix_media_job_id', 'media', ['job_id'])

    op.create_table(
        'outbox_events',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('event_type', sa.String(50), nullable=False),
        sa.Column('aggregate_id', sa.String(64), nullable=False),
        sa.Column('business_id', sa.String(64), nullable=False),
        sa.Column('audience', sa.JSON(), nullable=False),
        sa.Column('event_data', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('retry_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_outbox_events'),
    )
    op.create_index('ix_outbox_events_aggregate_id', 'outbox_events', ['aggregate_id'])
    op.create_index(
        'idx_outbox_events_status_created', 'outbox_events', ['status', 'created_at']
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_outbox_events_status_created', table_name='outbox_events')
    op.drop_index('ix_outbox_events_aggregate_id', table_name='outbox_events')
    op.drop_table('outbox_events')

    op.drop_index('ix_media_job_id', table_name='media')
    op.drop_table('media')

    op.drop_index('ix_invoice_line_items_job_id', table_name='invoice_line_items')
    op.drop_index('ix_invoice_line_items_invoice_id', table_name='invoice_line_items')
    op.drop_table('invoice_line_items')

    op.drop_index('uq_invoices_one_open_per_cleaner', table_name='invoices')
    op.drop_index('idx_invoices_cleaner_status', table_name='invoices')
    op.drop_index('ix_invoices_business_id', table_name='invoices')
    op.drop_table('invoices')

    op.drop_index('idx_cleaning_jobs_cleaner_status', table_name='cleaning_jobs')
    op.drop_index('idx_cleaning_jobs_business_status', table_name='cleaning_jobs')
    op.drop_index('ix_cleaning_jobs_property_id', table_name='cleaning_jobs')
    op.drop_table('cleaning_jobs')

    op.drop_index('ix_properties_business_id', table_name='properties')
    op.drop_table('properties')

    op.drop_index('ix_users_business_id', table_name='users')
    op.drop_table('users')
