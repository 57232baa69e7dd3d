from __future__ import annotations


class SchedulingError(Exception):
    """Base class for failures surfaced to callers as a structured error payload."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(SchedulingError):
    """Missing or invalid credential at any tier.

    The message is fixed so callers never learn which rule rejected them.
    """

    status_code = 401
    default_message = "Unauthorized"

    def __init__(self) -> None:
        super().__init__(self.default_message)


class InvalidInput(SchedulingError):
    status_code = 400
    default_message = "Invalid input"


class Forbidden(SchedulingError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(SchedulingError):
    status_code = 404
    default_message = "not found"


class RateLimited(SchedulingError):
    status_code = 429
    default_message = "Too many creates from your IP. Please wait."


class InternalError(SchedulingError):
    status_code = 500
