"""
Centralized configuration for the reminder scheduling service.

All settings come from environment variables (loaded from .env / .env.local
by the entry points) through the accessors below.
"""

import os


def is_dev_mode() -> bool:
    """Check if running in development mode (--dev flag or DEV_MODE env)."""
    return os.getenv("DEV_MODE", "").lower() in ("true", "1", "yes")


def is_production() -> bool:
    """Check if running in a deployed environment."""
    return os.getenv("ENVIRONMENT", "").lower() == "production"


def get_database_url() -> str | None:
    """Raw PostgreSQL connection string; drivers are chosen in database.py."""
    return os.environ.get("DATABASE_URL")


def is_sql_echo() -> bool:
    return os.getenv("SQL_ECHO", "").lower() == "true"


def get_api_port() -> int:
    """Get API server port from env or default."""
    return int(os.getenv("API_PORT", "8000"))


def get_allowed_origins() -> list[str]:
    """Get list of allowed CORS origins."""
    origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    frontend_url = os.environ.get("FRONTEND_URL")
    if frontend_url and frontend_url.rstrip("/") not in origins:
        origins.append(frontend_url.rstrip("/"))
    return origins


# =============================================================================
# Message generation
# =============================================================================


def get_llm_provider() -> str:
    """LiteLLM model string used to write reminder text."""
    return os.getenv("LLM_PROVIDER", "openrouter/openai/gpt-4-turbo")


def get_llm_timeout_seconds() -> float:
    return float(os.getenv("LLM_TIMEOUT_SECONDS", "10"))


# =============================================================================
# Trigger backend
# =============================================================================


def get_trigger_backend() -> str:
    """Which external scheduler to use: "apscheduler" or "eventbridge"."""
    return os.getenv("REMINDER_TRIGGER_BACKEND", "apscheduler").lower()


def get_delivery_url() -> str | None:
    """Fixed downstream endpoint that receives {contact, message} when a trigger fires."""
    return os.environ.get("REMINDER_DELIVERY_URL")


def get_delivery_token() -> str | None:
    return os.environ.get("REMINDER_DELIVERY_TOKEN")


def get_aws_region() -> str | None:
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION")


def get_target_arn() -> str | None:
    """ARN of the delivery function invoked by EventBridge schedules."""
    return os.environ.get("REMINDER_TARGET_ARN")


def get_target_role_arn() -> str | None:
    """IAM role EventBridge assumes to invoke the delivery target."""
    return os.environ.get("REMINDER_TARGET_ROLE_ARN")


# =============================================================================
# Fan-out limits
# =============================================================================


def get_max_concurrency() -> int:
    """Maximum offsets processed in parallel for one request."""
    return max(1, int(os.getenv("REMINDER_MAX_CONCURRENCY", "3")))


def get_call_timeout_seconds() -> float:
    """Timeout applied to each external call (content, create, delete)."""
    return float(os.getenv("REMINDER_CALL_TIMEOUT_SECONDS", "15"))


def get_request_timeout_seconds() -> float:
    """Timeout bounding the whole create operation."""
    return float(os.getenv("REMINDER_REQUEST_TIMEOUT_SECONDS", "60"))


# Required environment variables
# Format: (name, description, required_in_dev)
REQUIRED_ENV_VARS = [
    ("DATABASE_URL", "PostgreSQL connection string", True),
    ("REMINDER_DELIVERY_URL", "Delivery endpoint for fired reminders", False),
    ("OPENROUTER_API_KEY", "API key for reminder text generation", False),
]

# Additional variables required only by the EventBridge backend
EVENTBRIDGE_ENV_VARS = [
    ("AWS_REGION", "AWS region for EventBridge Scheduler"),
    ("REMINDER_TARGET_ARN", "ARN of the delivery target"),
    ("REMINDER_TARGET_ROLE_ARN", "IAM role ARN for EventBridge"),
]


def check_required_env_vars() -> tuple[bool, list[str]]:
    """
    Check that required environment variables are set.

    Returns:
        (all_ok, warnings): Tuple of success flag and list of warning messages
    """
    warnings = []
    errors = []
    in_dev = is_dev_mode()

    required = list(REQUIRED_ENV_VARS)
    if get_trigger_backend() == "eventbridge":
        required += [(name, desc, True) for name, desc in EVENTBRIDGE_ENV_VARS]

    for name, description, required_in_dev in required:
        value = os.environ.get(name)

        if not value:
            if is_production():
                errors.append(f"  ✗ {name}: Not set ({description})")
            elif required_in_dev or not in_dev:
                warnings.append(f"  ⚠ {name}: Not set ({description})")

    if errors:
        for error in errors:
            print(error)
        return False, warnings

    return True, warnings
