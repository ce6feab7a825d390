"""
SQLAlchemy ORM models (one table per dashboard collection)

Every row belongs to exactly one account (``account_id`` == users.id).
Child rows (key_results, tasks, habit_logs) reference their parent by id
only: they are created and deleted independently.
"""
from decimal import Decimal
from datetime import date as date_type
from sqlalchemy import String, DateTime, Integer, SmallInteger, Text, TIMESTAMP, Date, func, Boolean, Numeric, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import JSONB

from app.infrastructure.db.session import Base


class User(Base):
    """
    User model (identity provider for every other table)
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    last_seen_at: Mapped[DateTime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )


# ============================================================================
# Finances
# ============================================================================


class TransactionModel(Base):
    """Income / expense record. Immutable except through explicit edit."""
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)  # income/expense
    category: Mapped[str] = mapped_column(String(128), nullable=False)
    method: Mapped[str | None] = mapped_column(String(64), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index('ix_transactions_account_date', 'account_id', 'date'),
    )


class FinancialGoalModel(Base):
    """Savings goal. progress_percentage is entered by hand, never derived."""
    __tablename__ = "financial_goals"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    objective: Mapped[str] = mapped_column(Text, nullable=False)
    target_amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    target_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, server_default="active")  # active/completed/cancelled
    progress_percentage: Mapped[int] = mapped_column(SmallInteger, nullable=False, server_default="0")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


# ============================================================================
# Library & contacts
# ============================================================================


class LibraryItemModel(Base):
    """Learning resource (article, course, book ...)"""
    __tablename__ = "library_items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)  # article/course/book/video/note/other
    topic: Mapped[str | None] = mapped_column(String(255), nullable=True)
    source: Mapped[str | None] = mapped_column(String(255), nullable=True)
    link: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    insight: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, server_default="pending")

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


class ContactModel(Base):
    """Professional contact with follow-up dates"""
    __tablename__ = "professional_contacts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_contact: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    next_contact: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    industry: Mapped[str | None] = mapped_column(String(128), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


# ============================================================================
# Objectives (OKR)
# ============================================================================


class ObjectiveModel(Base):
    __tablename__ = "objectives"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    objective: Mapped[str] = mapped_column(Text, nullable=False)
    area: Mapped[str] = mapped_column(String(32), nullable=False)  # personal/professional
    period: Mapped[str] = mapped_column(String(64), nullable=False)  # free text, e.g. "Q1 2026"
    priority: Mapped[str] = mapped_column(String(16), nullable=False, server_default="medium")
    status: Mapped[str] = mapped_column(String(32), nullable=False, server_default="active")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


class KeyResultModel(Base):
    """Measurable sub-target. progress_percentage is recomputed on every edit."""
    __tablename__ = "key_results"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    objective_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)  # -> objectives

    key_result: Mapped[str] = mapped_column(Text, nullable=False)
    metric: Mapped[str] = mapped_column(String(128), nullable=False)
    baseline: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=4), nullable=False, server_default="0")
    target: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=4), nullable=False)
    current_value: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=4), nullable=False, server_default="0")
    target_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    progress_percentage: Mapped[int] = mapped_column(SmallInteger, nullable=False, server_default="0")

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


# ============================================================================
# Projects & tasks
# ============================================================================


class ProjectModel(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)
    area: Mapped[str] = mapped_column(String(32), nullable=False)  # personal/professional
    type: Mapped[str | None] = mapped_column(String(32), nullable=True)  # work/personal/learning/other
    status: Mapped[str] = mapped_column(String(32), nullable=False, server_default="backlog")
    priority: Mapped[str] = mapped_column(String(16), nullable=False, server_default="medium")
    start_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    deadline: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    owner: Mapped[str | None] = mapped_column(String(255), nullable=True)
    stakeholders: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    expected_impact: Mapped[str | None] = mapped_column(Text, nullable=True)
    risks: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


class TaskModel(Base):
    """Kanban task. project_id is a soft reference and may be NULL."""
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    project_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)  # -> projects

    task: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, server_default="todo")  # todo/in_progress/done
    priority: Mapped[str] = mapped_column(String(16), nullable=False, server_default="medium")
    estimation: Mapped[Decimal | None] = mapped_column(Numeric(precision=8, scale=2), nullable=True)  # hours
    sprint: Mapped[str | None] = mapped_column(String(64), nullable=True)
    assigned_to: Mapped[str | None] = mapped_column(String(255), nullable=True)
    deadline: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    tags: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    blockers: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


# ============================================================================
# Habits
# ============================================================================


class HabitModel(Base):
    __tablename__ = "habits"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    habit: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)  # health/language/productivity/learning/other
    frequency: Mapped[str] = mapped_column(String(16), nullable=False, server_default="daily")
    trigger: Mapped[str | None] = mapped_column(Text, nullable=True)
    action: Mapped[str | None] = mapped_column(Text, nullable=True)
    reward: Mapped[str | None] = mapped_column(Text, nullable=True)
    metric_type: Mapped[str] = mapped_column(String(16), nullable=False, server_default="boolean")
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    # Stored only; nothing recomputes it yet
    consistency_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


class HabitLogModel(Base):
    """At most one log per (habit, day)."""
    __tablename__ = "habit_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    habit_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)  # -> habits

    log_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    value: Mapped[Decimal | None] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    energy_level: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint('account_id', 'habit_id', 'log_date', name='uq_habit_log_day'),
        Index('ix_habit_logs_date', 'account_id', 'log_date'),
    )
