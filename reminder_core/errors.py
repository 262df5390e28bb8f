"""Exception taxonomy for reminder scheduling."""


class ReminderError(Exception):
    """Base class for reminder scheduling errors."""


class ValidationError(ReminderError):
    """The request is rejected as a whole; nothing was persisted."""


class NotFoundError(ReminderError):
    """The referenced scheduled task does not exist."""


class ExternalServiceError(ReminderError):
    """A call to the external trigger service failed (transport, auth, quota)."""


class ConflictError(ReminderError):
    """A trigger with the same name already exists."""

    def __init__(self, name: str):
        super().__init__(f"Trigger {name} already exists")
        self.name = name
