"""create lifedash tables

Revision ID: a0b1c2d3e4f5
Revises:
Create Date: 2026-10-16 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'a0b1c2d3e4f5'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    """Users plus one table per dashboard collection."""

    # 1. users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('last_seen_at', sa.TIMESTAMP(timezone=True), nullable=True),
    )

    # 2. transactions
    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False, index=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Numeric(20, 2), nullable=False),
        sa.Column('type', sa.String(16), nullable=False),
        sa.Column('category', sa.String(128), nullable=False),
        sa.Column('method', sa.String(64), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index('ix_transactions_account_date', 'transactions', ['account_id', 'date'])

    # 3. financial_goals
    op.create_table(
        'financial_goals',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False, index=True),
        sa.Column('objective', sa.Text(), nullable=False),
        sa.Column('target_amount', sa.Numeric(20, 2), nullable=False),
        sa.Column('target_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(32), nullable=False, server_default='active'),
        sa.Column('progress_percentage', sa.SmallInteger(), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        _created_at(),
    )

    # 4. library_items
    op.create_table(
        'library_items',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False, index=True),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('type', sa.String(32), nullable=False),
        sa.Column('topic', sa.String(255), nullable=True),
        sa.Column('source', sa.String(255), nullable=True),
        sa.Column('link', sa.Text(), nullable=True),
        sa.Column('tags', postgresql.JSONB(), nullable=True),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.Column('insight', sa.Text(), nullable=True),
        sa.Column('status', sa.String(32), nullable=False, server_default='pending'),
        _created_at(),
    )

    # 5. professional_contacts
    op.create_table(
        'professional_contacts',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('company', sa.String(255), nullable=True),
        sa.Column('role', sa.String(255), nullable=True),
        sa.Column('last_contact', sa.Date(), nullable=True),
        sa.Column('next_contact', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('industry', sa.String(128), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(64), nullable=True),
        _created_at(),
    )

    # 6. objectives + key_results
    op.create_table(
        'objectives',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False, index=True),
        sa.Column('objective', sa.Text(), nullable=False),
        sa.Column('area', sa.String(32), nullable=False),
        sa.Column('period', sa.String(64), nullable=False),
        sa.Column('priority', sa.String(16), nullable=False, server_default='medium'),
        sa.Column('status', sa.String(32), nullable=False, server_default='active'),
        sa.Column('description', sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_table(
        'key_results',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False, index=True),
        sa.Column('objective_id', sa.Integer(), nullable=False, index=True),
        sa.Column('key_result', sa.Text(), nullable=False),
        sa.Column('metric', sa.String(128), nullable=False),
        sa.Column('baseline', sa.Numeric(20, 4), nullable=False, server_default='0'),
        sa.Column('target', sa.Numeric(20, 4), nullable=False),
        sa.Column('current_value', sa.Numeric(20, 4), nullable=False, server_default='0'),
        sa.Column('target_date', sa.Date(), nullable=True),
        sa.Column('progress_percentage', sa.SmallInteger(), nullable=False, server_default='0'),
        _created_at(),
    )

    # 7. projects + tasks
    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False, index=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('area', sa.String(32), nullable=False),
        sa.Column('type', sa.String(32), nullable=True),
        sa.Column('status', sa.String(32), nullable=False, server_default='backlog'),
        sa.Column('priority', sa.String(16), nullable=False, server_default='medium'),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('deadline', sa.Date(), nullable=True),
        sa.Column('owner', sa.String(255), nullable=True),
        sa.Column('stakeholders', postgresql.JSONB(), nullable=True),
        sa.Column('expected_impact', sa.Text(), nullable=True),
        sa.Column('risks', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False, index=True),
        sa.Column('project_id', sa.Integer(), nullable=True, index=True),
        sa.Column('task', sa.Text(), nullable=False),
        sa.Column('status', sa.String(32), nullable=False, server_default='todo'),
        sa.Column('priority', sa.String(16), nullable=False, server_default='medium'),
        sa.Column('estimation', sa.Numeric(8, 2), nullable=True),
        sa.Column('sprint', sa.String(64), nullable=True),
        sa.Column('assigned_to', sa.String(255), nullable=True),
        sa.Column('deadline', sa.Date(), nullable=True),
        sa.Column('tags', postgresql.JSONB(), nullable=True),
        sa.Column('blockers', sa.Text(), nullable=True),
        _created_at(),
    )

    # 8. habits + habit_logs
    op.create_table(
        'habits',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False, index=True),
        sa.Column('habit', sa.Text(), nullable=False),
        sa.Column('category', sa.String(32), nullable=False),
        sa.Column('frequency', sa.String(16), nullable=False, server_default='daily'),
        sa.Column('trigger', sa.Text(), nullable=True),
        sa.Column('action', sa.Text(), nullable=True),
        sa.Column('reward', sa.Text(), nullable=True),
        sa.Column('metric_type', sa.String(16), nullable=False, server_default='boolean'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('consistency_score', sa.Integer(), nullable=False, server_default='0'),
        _created_at(),
    )
    op.create_table(
        'habit_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False, index=True),
        sa.Column('habit_id', sa.Integer(), nullable=False, index=True),
        sa.Column('log_date', sa.Date(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('value', sa.Numeric(12, 2), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('energy_level', sa.SmallInteger(), nullable=True),
        _created_at(),
        sa.UniqueConstraint('account_id', 'habit_id', 'log_date', name='uq_habit_log_day'),
    )
    op.create_index('ix_habit_logs_date', 'habit_logs', ['account_id', 'log_date'])


def downgrade() -> None:
    op.drop_index('ix_habit_logs_date', table_name='habit_logs')
    op.drop_table('habit_logs')
    op.drop_table('habits')
    op.drop_table('tasks')
    op.drop_table('projects')
    op.drop_table('key_results')
    op.drop_table('objectives')
    op.drop_table('professional_contacts')
    op.drop_table('library_items')
    op.drop_table('financial_goals')
    op.drop_index('ix_transactions_account_date', table_name='transactions')
    op.drop_table('transactions')
    op.drop_table('users')
