"""
Backend entry point for the reminder scheduling service.

Architecture:
- One Python process, one asyncio event loop
- FastAPI serves the reminder API
- The trigger client (APScheduler or EventBridge) is built once in the
  lifespan and injected into the orchestrator; with the APScheduler backend
  the scheduler runs in the same event loop and fires delivery jobs itself

Run with: python main.py [--port PORT] [--backend apscheduler|eventbridge]
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

# Load .env.local first (if exists), then .env as fallback
# .env.local is gitignored and used for local dev overrides
load_dotenv(project_root / ".env.local")  # Local overrides (gitignored)
load_dotenv()  # Fallback to .env

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reminder_core.config import (
    check_required_env_vars,
    get_allowed_origins,
    get_api_port,
    get_trigger_backend,
)
from reminder_core.database import check_connection, close_engine
from reminder_core.orchestrator import ReminderOrchestrator
from reminder_core.store import SqlScheduledTaskStore
from reminder_core.triggers import build_trigger_client, shutdown_scheduler
from web_api.routes.reminders import router as reminders_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.

    Builds the orchestrator with its collaborators on startup and tears
    down the scheduler and database pool on shutdown.
    """
    ok, warnings = check_required_env_vars()
    for warning in warnings:
        print(warning)
    if not ok:
        raise RuntimeError("Missing required environment variables")

    backend = get_trigger_backend()
    print(f"Starting reminder service (trigger backend: {backend})...")
    app.state.orchestrator = ReminderOrchestrator(
        store=SqlScheduledTaskStore(),
        triggers=build_trigger_client(backend),
    )

    yield

    print("Shutting down reminder service...")
    app.state.orchestrator = None
    shutdown_scheduler()
    await close_engine()  # Close database connections


app = FastAPI(
    title="Task Reminder Scheduling API",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(reminders_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    orchestrator = getattr(app.state, "orchestrator", None)
    database_ok = await check_connection()
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "connected" if database_ok else "unavailable",
        "trigger_backend": get_trigger_backend(),
        "scheduling_ready": orchestrator is not None,
    }


if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Task Reminder Scheduling Server")
    parser.add_argument(
        "--port",
        type=int,
        default=get_api_port(),
        help="Port to run the server on (default: 8000)",
    )
    parser.add_argument(
        "--backend",
        choices=["apscheduler", "eventbridge"],
        help="Trigger backend (overrides REMINDER_TRIGGER_BACKEND)",
    )
    args = parser.parse_args()

    # Set env var so it persists across uvicorn reloads
    if args.backend:
        os.environ["REMINDER_TRIGGER_BACKEND"] = args.backend

    # Pass app object directly (not string) to avoid module reimport issues
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=args.port,
    )
