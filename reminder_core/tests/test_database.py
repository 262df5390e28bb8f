"""Tests for database URL handling and the connection check."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

import pytest


class TestDatabaseUrls:
    @pytest.mark.parametrize(
        "raw",
        [
            "postgresql://u:p@db:5432/reminders",
            "postgres://u:p@db:5432/reminders",
            "postgresql+psycopg2://u:p@db:5432/reminders",
        ],
    )
    def test_async_url_uses_asyncpg(self, monkeypatch, raw):
        from reminder_core.database import get_async_database_url

        monkeypatch.setenv("DATABASE_URL", raw)

        assert get_async_database_url() == "postgresql+asyncpg://u:p@db:5432/reminders"

    def test_sync_url_drops_async_driver(self, monkeypatch):
        from reminder_core.database import get_sync_database_url

        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/reminders")

        assert get_sync_database_url() == "postgresql://u:p@db/reminders"

    def test_connect_timeout_is_appended_to_existing_query(self, monkeypatch):
        from reminder_core.database import get_sync_database_url

        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/reminders?sslmode=require")

        assert get_sync_database_url(connect_timeout=5) == (
            "postgresql://u:p@db/reminders?sslmode=require&connect_timeout=5"
        )

    def test_existing_connect_timeout_is_kept(self, monkeypatch):
        from reminder_core.database import get_sync_database_url

        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/r?connect_timeout=9")

        assert get_sync_database_url(connect_timeout=5).endswith("connect_timeout=9")

    def test_missing_url_raises(self, monkeypatch):
        from reminder_core.database import get_async_database_url, get_sync_database_url

        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(ValueError):
            get_async_database_url()
        with pytest.raises(ValueError):
            get_sync_database_url()

    def test_non_postgres_url_raises(self, monkeypatch):
        from reminder_core.database import get_async_database_url

        monkeypatch.setenv("DATABASE_URL", "sqlite:///reminders.db")

        with pytest.raises(ValueError):
            get_async_database_url()


class TestCheckConnection:
    @pytest.mark.asyncio
    async def test_true_when_query_succeeds(self):
        from reminder_core.database import check_connection

        conn = AsyncMock()

        @asynccontextmanager
        async def connection():
            yield conn

        with patch("reminder_core.database.get_connection", connection):
            assert await check_connection() is True
        conn.execute.assert_called_once()

    @pytest.mark.asyncio
    async def test_false_when_database_unreachable(self):
        from reminder_core.database import check_connection

        @asynccontextmanager
        async def connection():
            raise OSError("connection refused")
            yield

        with patch("reminder_core.database.get_connection", connection):
            assert await check_connection() is False
