"""
External trigger clients.

Public API:
    TriggerClient - interface the orchestrator depends on
    make_trigger_name(task_id, offset) - deterministic trigger name
    build_trigger_client() - construct the configured backend
"""

from ..config import get_trigger_backend
from .base import TriggerClient, make_trigger_name
from .scheduler import ApschedulerTriggerClient, init_scheduler, shutdown_scheduler


def build_trigger_client(backend: str | None = None) -> TriggerClient:
    """
    Construct the trigger client for the configured backend.

    The APScheduler backend starts the scheduler if it is not running yet.

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = (backend or get_trigger_backend()).lower()

    if backend == "apscheduler":
        return ApschedulerTriggerClient(init_scheduler())

    if backend == "eventbridge":
        from .eventbridge import EventBridgeTriggerClient

        return EventBridgeTriggerClient()

    raise ValueError(f"Unknown trigger backend: {backend}")


__all__ = [
    "TriggerClient",
    "make_trigger_name",
    "build_trigger_client",
    "ApschedulerTriggerClient",
    "init_scheduler",
    "shutdown_scheduler",
]
