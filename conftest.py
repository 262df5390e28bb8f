"""Root pytest configuration and shared reminder fixtures."""

from datetime import datetime, timezone
from pathlib import Path
from uuid import UUID

import pytest
from dotenv import load_dotenv

# Load environment variables before tests run
_root = Path(__file__).parent
load_dotenv(_root / ".env")
load_dotenv(_root / ".env.local", override=True)


@pytest.fixture(scope="session")
def event_loop_policy():
    """Use default event loop policy for all async tests."""
    import asyncio

    return asyncio.DefaultEventLoopPolicy()


@pytest.fixture
def now():
    """Fixed clock value: 2025-06-01T00:00:00Z."""
    return datetime(2025, 6, 1, tzinfo=timezone.utc)


@pytest.fixture
def task_id():
    """Id the in-memory store assigns to the first inserted task."""
    return UUID("00000000-0000-0000-0000-0000000000aa")


@pytest.fixture
def task_store(task_id):
    from reminder_core.tests.fakes import InMemoryTaskStore

    return InMemoryTaskStore(next_ids=[task_id])


@pytest.fixture
def trigger_client():
    from reminder_core.tests.fakes import FakeTriggerClient

    return FakeTriggerClient()


@pytest.fixture
def make_orchestrator(task_store, trigger_client, now):
    """
    Factory for ReminderOrchestrator over the in-memory fakes.

    Keyword overrides replace the store, trigger client or any
    constructor option (message_generator, clock, timeouts).
    """
    from reminder_core.orchestrator import ReminderOrchestrator
    from reminder_core.tests.fakes import fixed_message

    def build(**overrides):
        options = {
            "store": task_store,
            "triggers": trigger_client,
            "message_generator": fixed_message,
            "clock": lambda: now,
            "max_concurrency": 3,
            "call_timeout": 5,
            "request_timeout": 10,
        }
        options.update(overrides)
        return ReminderOrchestrator(**options)

    return build


@pytest.fixture
def orchestrator(make_orchestrator):
    return make_orchestrator()
