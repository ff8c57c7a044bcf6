"""create_marketplace_tables

Revision ID: 3f9c1a7e2b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1a7e2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, profiles, tasks, applications, submissions, payments and activity_log."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True, nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(254), nullable=False, unique=True, index=True),
        sa.Column('api_key_hash', sa.String(256), nullable=False, index=True),
        sa.Column('role', sa.String(20), nullable=False, index=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active', index=True),
        sa.Column('created_at', sa.TIMESTAMP, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('last_seen_at', sa.TIMESTAMP, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    op.create_table(
        'worker_profiles',
        sa.Column('id', sa.String(36), primary_key=True, nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('skills', sa.JSON, nullable=False),
        sa.Column('bio', sa.Text, nullable=False, server_default=''),
        sa.Column('availability_status', sa.String(20), nullable=False, server_default='available'),
        sa.Column('completed_tasks', sa.Integer, nullable=False, server_default='0'),
        sa.Column('total_earnings', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('rating', sa.Numeric(3, 2), nullable=False, server_default='0'),
        sa.Column('total_ratings', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    op.create_table(
        'company_profiles',
        sa.Column('id', sa.String(36), primary_key=True, nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('company_name', sa.String(200), nullable=False, server_default=''),
        sa.Column('domain', sa.String(200), nullable=False, server_default=''),
        sa.Column('description', sa.Text, nullable=False, server_default=''),
        sa.Column('logo', sa.String(500), nullable=False, server_default=''),
        sa.Column('verification_status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('rating', sa.Numeric(3, 2), nullable=False, server_default='0'),
        sa.Column('total_ratings', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    op.create_table(
        'tasks',
        sa.Column('id', sa.String(36), primary_key=True, nullable=False),
        sa.Column('company_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('required_skills', sa.JSON, nullable=False),
        sa.Column('category', sa.String(100), nullable=False, server_default='General', index=True),
        sa.Column('duration', sa.Integer, nullable=False, server_default='1'),
        sa.Column('payment_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('deadline', sa.TIMESTAMP, nullable=False),
        sa.Column('number_of_workers', sa.Integer, nullable=False, server_default='1'),
        sa.Column('assigned_workers', sa.JSON, nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft', index=True),
        sa.Column('rejection_reason', sa.Text, nullable=False, server_default=''),
        sa.Column('created_at', sa.TIMESTAMP, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP'), index=True),
        sa.Column('updated_at', sa.TIMESTAMP, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.CheckConstraint('duration BETWEEN 1 AND 3', name='ck_tasks_duration'),
        sa.CheckConstraint('payment_amount >= 0', name='ck_tasks_payment_amount'),
        sa.CheckConstraint('number_of_workers >= 1', name='ck_tasks_number_of_workers'),
    )

    op.create_table(
        'applications',
        sa.Column('id', sa.String(36), primary_key=True, nullable=False),
        sa.Column('task_id', sa.String(36), sa.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('worker_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('proposal', sa.Text, nullable=False),
        sa.Column('expected_delivery_time', sa.String(100), nullable=False),
        sa.Column('attachment', sa.String(500), nullable=False, server_default=''),
        sa.Column('status', sa.String(20), nullable=False, server_default='applied', index=True),
        sa.Column('created_at', sa.TIMESTAMP, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.UniqueConstraint('task_id', 'worker_id', name='uq_applications_task_worker'),
    )

    op.create_table(
        'submissions',
        sa.Column('id', sa.String(36), primary_key=True, nullable=False),
        sa.Column('task_id', sa.String(36), sa.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('worker_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('files', sa.JSON, nullable=False),
        sa.Column('description', sa.Text, nullable=False, server_default=''),
        sa.Column('submitted_at', sa.TIMESTAMP, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('review_status', sa.String(20), nullable=False, server_default='pending', index=True),
        sa.Column('review_notes', sa.Text, nullable=False, server_default=''),
        sa.Column('revision_count', sa.Integer, nullable=False, server_default='0'),
        sa.UniqueConstraint('task_id', 'worker_id', name='uq_submissions_task_worker'),
    )

    op.create_table(
        'payments',
        sa.Column('id', sa.String(36), primary_key=True, nullable=False),
        sa.Column('task_id', sa.String(36), nullable=False, index=True),
        sa.Column('submission_id', sa.String(36), nullable=False, unique=True),
        sa.Column('worker_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('company_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('platform_commission', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('platform_fee', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('worker_payout', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending', index=True),
        sa.Column('proof', sa.String(500), nullable=False, server_default=''),
        sa.Column('transaction_id', sa.String(200), nullable=False, server_default=''),
        sa.Column('payment_method', sa.String(20), nullable=False, server_default='manual'),
        sa.Column('escrow_status', sa.String(20), nullable=False, server_default='none'),
        sa.Column('created_at', sa.TIMESTAMP, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP'), index=True),
        sa.Column('confirmed_at', sa.TIMESTAMP, nullable=True),
        sa.CheckConstraint('amount >= 0', name='ck_payments_amount'),
        sa.CheckConstraint(
            'platform_commission >= 0 AND platform_commission <= 100',
            name='ck_payments_platform_commission'
        ),
    )

    op.create_table(
        'activity_log',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('event_type', sa.String(50), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=True),
        sa.Column('task_id', sa.String(36), nullable=True, index=True),
        sa.Column('data', sa.JSON, nullable=False),
        sa.Column('created_at', sa.TIMESTAMP, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('idx_activity_created', 'activity_log', ['created_at'])
    op.create_index('idx_activity_type', 'activity_log', ['event_type'])


def downgrade() -> None:
    """Drop all marketplace tables."""
    op.drop_index('idx_activity_type', table_name='activity_log')
    op.drop_index('idx_activity_created', table_name='activity_log')
    op.drop_table('activity_log')
    op.drop_table('payments')
    op.drop_table('submissions')
    op.drop_table('applications')
    op.drop_table('tasks')
    op.drop_table('company_profiles')
    op.drop_table('worker_profiles')
    op.drop_table('users')
