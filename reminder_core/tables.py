"""SQLAlchemy Core table definitions for the database schema."""

from sqlalchemy import Column, Index, MetaData, Table, Text, func, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

from .enums import scheduled_task_status_enum

# Naming convention for constraints (helps Alembic generate better names)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=convention)


# =====================================================
# SCHEDULED TASKS
# =====================================================
# owner_id / context_id are opaque references owned by the identity and
# project services - no foreign keys here.
scheduled_tasks = Table(
    "scheduled_tasks",
    metadata,
    Column(
        "task_id",
        UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    ),
    Column("owner_id", Text, nullable=False),
    Column("context_id", Text, nullable=False),
    Column("recipient_name", Text, nullable=False),
    Column("recipient_contact", Text, nullable=False),
    Column("recipient_timezone", Text),
    Column("task_label", Text, nullable=False),
    Column("task_description", Text, nullable=False),
    Column("target_at", TIMESTAMP(timezone=True), nullable=False),
    Column("requested_offsets", JSONB, nullable=False),  # ["1hour", "1day", ...]
    Column("trigger_handles", JSONB, nullable=False, server_default="[]"),
    Column(
        "status",
        scheduled_task_status_enum,
        nullable=False,
        server_default="idle",
    ),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("updated_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_scheduled_tasks_context_id", "context_id"),
    Index("idx_scheduled_tasks_owner_id", "owner_id"),
)
