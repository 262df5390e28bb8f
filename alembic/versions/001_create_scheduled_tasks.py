"""create scheduled_tasks

Revision ID: 001
Revises:
Create Date: 2025-05-20 10:12:31.402117

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


scheduled_task_status = postgresql.ENUM(
    "idle",
    "scheduled",
    "sent",
    "failed",
    "cancelled",
    name="scheduled_task_status",
    create_type=False,
)


def upgrade() -> None:
    scheduled_task_status.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "scheduled_tasks",
        sa.Column(
            "task_id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("owner_id", sa.Text(), nullable=False),
        sa.Column("context_id", sa.Text(), nullable=False),
        sa.Column("recipient_name", sa.Text(), nullable=False),
        sa.Column("recipient_contact", sa.Text(), nullable=False),
        sa.Column("recipient_timezone", sa.Text(), nullable=True),
        sa.Column("task_label", sa.Text(), nullable=False),
        sa.Column("task_description", sa.Text(), nullable=False),
        sa.Column("target_at", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column(
            "requested_offsets",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
        ),
        sa.Column(
            "trigger_handles",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default="[]",
            nullable=False,
        ),
        sa.Column(
            "status",
            scheduled_task_status,
            server_default="idle",
            nullable=False,
        ),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("task_id", name=op.f("pk_scheduled_tasks")),
    )
    op.create_index(
        "idx_scheduled_tasks_context_id",
        "scheduled_tasks",
        ["context_id"],
        unique=False,
    )
    op.create_index(
        "idx_scheduled_tasks_owner_id", "scheduled_tasks", ["owner_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("idx_scheduled_tasks_owner_id", table_name="scheduled_tasks")
    op.drop_index("idx_scheduled_tasks_context_id", table_name="scheduled_tasks")
    op.drop_table("scheduled_tasks")
    scheduled_task_status.drop(op.get_bind(), checkfirst=True)
