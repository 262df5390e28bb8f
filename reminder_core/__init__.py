"""
Core reminder scheduling logic - transport-agnostic.
Can be used by the web API or any other interface.
"""

# Database (SQLAlchemy)
from .database import get_connection, get_transaction, get_engine, close_engine, check_connection

# Enums and types
from .enums import NotificationOffsetKind, ScheduledTaskStatus
from .types import (
    ScheduleRequest, ValidatedRequest, ScheduledTask, ScheduleResult,
    CancelResult, TriggerPayload,
)

# Errors
from .errors import (
    ReminderError, ValidationError, NotFoundError,
    ExternalServiceError, ConflictError,
)

# Offset catalog and time arithmetic
from .offsets import OFFSET_CATALOG, get_offset_label, get_offset_duration
from .timing import compute_trigger_time, is_past

# Message generation
from .messages import generate_message, render_fallback_message

# Persistence
from .store import ScheduledTaskStore, SqlScheduledTaskStore

# Orchestration
from .orchestrator import ReminderOrchestrator

__all__ = [
    # Database (SQLAlchemy)
    'get_connection', 'get_transaction', 'get_engine', 'close_engine', 'check_connection',
    # Enums and types
    'NotificationOffsetKind', 'ScheduledTaskStatus',
    'ScheduleRequest', 'ValidatedRequest', 'ScheduledTask', 'ScheduleResult',
    'CancelResult', 'TriggerPayload',
    # Errors
    'ReminderError', 'ValidationError', 'NotFoundError',
    'ExternalServiceError', 'ConflictError',
    # Offsets / timing
    'OFFSET_CATALOG', 'get_offset_label', 'get_offset_duration',
    'compute_trigger_time', 'is_past',
    # Messages
    'generate_message', 'render_fallback_message',
    # Persistence
    'ScheduledTaskStore', 'SqlScheduledTaskStore',
    # Orchestration
    'ReminderOrchestrator',
]
