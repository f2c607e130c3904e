# teamlogs/utils/exceptions.py
# -*- coding: utf-8 -*-
"""
Custom Exception Classes for the Application.

These exceptions are used to signal specific error conditions from the service layer
to the API layer (routes), allowing for more specific error handling and
mapping to appropriate HTTP status codes.
"""

class ServiceError(Exception):
    """Base class for service layer exceptions."""
    status_code = 500  # Default to Internal Server Error
    message = "An unexpected service error occurred."

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.message)
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"error": str(self)}


class ValidationFailed(ServiceError):
    """Raised when a submission is rejected before any store access."""
    status_code = 400
    message = "Validation failed."


class MissingField(ValidationFailed):
    """A required submission field is absent or empty."""
    message = "Missing required fields."

    def __init__(self, missing, required, message=None):
        self.missing = list(missing)
        self.required = list(required)
        super().__init__(message or (
            f"Missing required fields: {', '.join(self.required)} are required "
            f"(missing: {', '.join(self.missing)})"
        ))


class InvalidScore(ValidationFailed):
    """A score field is non-numeric or outside [0, 100]."""

    def __init__(self, field, message=None):
        self.field = field
        super().__init__(message or f"Invalid score for {field}. Must be a number between 0 and 100")


class MissingParameter(ServiceError):
    """Raised when a query parameter or required body field is absent."""
    status_code = 400
    message = "Missing required parameter."


class ResourceNotFound(ServiceError):
    """Raised when a requested resource is not found."""
    status_code = 404
    message = "The requested resource was not found."


class ConflictError(ServiceError):
    """Raised when an operation conflicts with the current state (e.g., duplicate)."""
    status_code = 409
    message = "A conflict occurred with the current state of the resource."


class StoreFailure(ServiceError):
    """
    Raised when the record store cannot complete an operation.

    `details` carries the underlying driver message for diagnostics; its wording
    depends on the database in use and is not stable.
    """
    status_code = 500
    message = "The record store could not complete the operation."

    def __init__(self, message=None, details=None):
        super().__init__(message)
        self.details = details or "Unknown error"

    def to_dict(self):
        return {"error": str(self), "details": self.details}


class StoreUnavailable(StoreFailure):
    """The database could not be reached."""
    message = "The record store is unavailable."


class StoreReadFailed(StoreFailure):
    """A query against the store failed."""
    message = "Failed to read from the record store."


class StoreWriteFailed(StoreFailure):
    """An insert or update against the store failed."""
    message = "Failed to write to the record store."


class NotificationFailure(Exception):
    """
    Webhook delivery failed (non-success status or transport error).

    Only ever logged by the notifier; never reaches a request handler.
    """

    def __init__(self, message, status_code=None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
