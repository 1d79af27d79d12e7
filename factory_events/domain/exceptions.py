"""Domain exceptions for the factory events service.

Per-record validation failures are NOT exceptions: they are reported as
rejections inside a batch result. The exceptions here cover caller
mistakes (bad request shape, unknown resource) and storage faults that
abort a whole batch. The presentation layer maps them to HTTP responses.
"""

from typing import Any


class FactoryEventsException(Exception):
    """Base exception for all factory events errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for an error response body."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(FactoryEventsException):
    """Raised when request input is malformed (e.g. batch body is not an array)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(FactoryEventsException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class EventStoreException(FactoryEventsException):
    """Raised when the event store fails for a reason other than a duplicate-insert race.

    Fatal to the batch being processed: the surrounding transaction rolls
    back and nothing from the batch persists.
    """

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Event store failure during {operation}",
            "EVENT_STORE_ERROR",
            {"operation": operation, "reason": reason},
        )
