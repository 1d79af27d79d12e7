"""Application services: validation and payload fingerprinting."""

from factory_events.application.services.event_validator import (
    EventValidator,
    ValidatedEvent,
    ValidationResult,
)
from factory_events.application.services.hash_service import (
    HashAlgorithm,
    HashService,
    SHA256Algorithm,
)

__all__ = [
    "EventValidator",
    "HashAlgorithm",
    "HashService",
    "SHA256Algorithm",
    "ValidatedEvent",
    "ValidationResult",
]
