"""Domain error taxonomy shared by the services, the API layer and the client."""

from __future__ import annotations

from typing import Any


class MarketplaceError(Exception):
    """Base class for every error the domain layer raises on purpose."""

    default_message = "The request could not be completed."

    def __init__(self, message: str | None = None, errors: dict[str, Any] | None = None):
        self.message = message or self.default_message
        self.errors = errors or {}
        super().__init__(self.message)


class ValidationError(MarketplaceError):
    """Malformed input: missing field, bad date range, out-of-bounds value."""

    default_message = "Please correct the highlighted fields."


class InvalidTransitionError(MarketplaceError):
    """An action was attempted from a state that does not permit it."""

    default_message = "This action is no longer available for the current state."

    def __init__(self, message: str | None = None, *, state: str | None = None, action: str | None = None):
        super().__init__(message)
        self.state = state
        self.action = action


class AuthorizationError(MarketplaceError):
    """Role or ownership mismatch. The message never says which check failed."""

    default_message = "You are not permitted to perform this action."

    def __init__(self, message: str | None = None):
        # The caller-facing text is fixed; the detail is kept for logs only.
        super().__init__(self.default_message)
        self.detail = message


class NotFoundError(MarketplaceError):
    """The entity does not exist or was disabled concurrently."""

    default_message = "The requested item could not be found."


class TransientError(MarketplaceError):
    """Network or server failure. Never retried automatically."""

    default_message = "The service is temporarily unavailable. Please try again."

    def __init__(self, message: str | None = None, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
