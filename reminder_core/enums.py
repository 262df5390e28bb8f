"""SQLAlchemy enum definitions for the database schema."""

import enum

from sqlalchemy import Enum as SQLEnum


# =====================================================
# Python Enum Classes
# =====================================================


class ScheduledTaskStatus(str, enum.Enum):
    idle = "idle"
    scheduled = "scheduled"
    sent = "sent"
    failed = "failed"
    cancelled = "cancelled"


class NotificationOffsetKind(str, enum.Enum):
    one_hour = "1hour"
    one_day = "1day"
    one_week = "1week"


# =====================================================
# SQLAlchemy Enum Types
# These reference existing PostgreSQL types (create_type=False)
# =====================================================

scheduled_task_status_enum = SQLEnum(
    ScheduledTaskStatus,
    name="scheduled_task_status",
    create_type=False,
    native_enum=True,
    values_callable=lambda e: [member.value for member in e],
)
