"""Domain errors raised by the service layer.

Every error is a locally detectable precondition failure. Handlers in
``cfc.middleware.error_handler`` turn them into JSON responses using
``status_code`` and ``error_code``.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for all domain errors."""

    status_code: int = 400
    error_code: str = "service_error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.error_code)
        self.message = message or self.error_code


class InvalidTransition(ServiceError):
    """A lifecycle operation was attempted from the wrong state."""

    status_code = 409
    error_code = "invalid_transition"


class CapacityExceeded(ServiceError):
    """The hero already holds the maximum number of active requests."""

    status_code = 409
    error_code = "capacity_exceeded"


class NotFound(ServiceError):
    status_code = 404
    error_code = "not_found"


class DuplicateEmail(ServiceError):
    status_code = 409
    error_code = "duplicate_email"


class AlreadyClaimed(ServiceError):
    status_code = 409
    error_code = "already_claimed"


class InsufficientPoints(ServiceError):
    status_code = 400
    error_code = "insufficient_points"


class AlreadyRated(ServiceError):
    """The request already has a rating, or is not completed yet."""

    status_code = 409
    error_code = "already_rated"


class NotAuthorized(ServiceError):
    """The caller does not own the resource it tried to act on."""

    status_code = 403
    error_code = "not_authorized"
