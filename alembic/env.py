"""
Alembic environment for the reminder service schema.

Only tables in reminder_core.tables are managed here. The APScheduler job
store table lives in the same database but is created by APScheduler, so
autogenerate must neither create nor drop it.
"""

import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import create_engine, pool

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

# Same precedence as main.py: .env.local overrides .env
load_dotenv(project_root / ".env")
load_dotenv(project_root / ".env.local", override=True)

from reminder_core.database import get_sync_database_url
from reminder_core.tables import metadata
from reminder_core.triggers.scheduler import JOBSTORE_TABLE

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = metadata

UNMANAGED_TABLES = {JOBSTORE_TABLE}


def include_object(object, name, type_, reflected, compare_to):
    """Skip tables owned by other components (and their indexes)."""
    if type_ == "table" and name in UNMANAGED_TABLES:
        return False
    if type_ == "index" and getattr(object, "table", None) is not None:
        return object.table.name not in UNMANAGED_TABLES
    return True


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        include_object=include_object,
        include_schemas=False,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL for the migrations without connecting to the database."""
    _configure(
        url=get_sync_database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a short-lived connection."""
    connectable = create_engine(
        get_sync_database_url(connect_timeout=10),
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        _configure(connection=connection, compare_type=True)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
