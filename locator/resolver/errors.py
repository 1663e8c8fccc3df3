from __future__ import annotations

GENERIC_FAILURE_MESSAGE = "An error occurred while searching for locations. Please try again."


class LocationError(Exception):
    """Base for resolution failures. ``message`` is safe to show to an end user."""

    message: str = GENERIC_FAILURE_MESSAGE

    def __init__(self, message: str | None = None, detail: str | None = None):
        if message is not None:
            self.message = message
        # detail is for logs only
        self.detail = detail
        super().__init__(detail or self.message)


class ValidationError(LocationError):
    """Query rejected before any network call (empty or too short)."""


class NotFoundError(LocationError):
    """Upstream returned no usable results."""


class TransportError(LocationError):
    """Non-success status, network failure, timeout or malformed payload."""

    message = GENERIC_FAILURE_MESSAGE
