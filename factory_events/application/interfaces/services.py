"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from factory_events.application.dtos.event import NormalizedEvent
    from factory_events.application.services.event_validator import ValidationResult


# Clock interface
class IClock(Protocol):
    """Protocol for the server clock (receivedTime stamps, validation 'now')."""

    def now(self) -> datetime:
        """Return the current UTC instant."""


# Payload fingerprint interface
class IPayloadHasher(Protocol):
    """Protocol for payload fingerprinting (dedup)."""

    def compute_payload_hash(self, event: NormalizedEvent) -> str:
        """Digest of the event's semantic fields; received_time excluded."""


# Event validator interface
class IEventValidator(Protocol):
    """Protocol for business-rule validation of one raw event."""

    def validate(self, raw: Any, now: datetime) -> ValidationResult:
        """Return the first failing rule, or a valid result carrying the parsed event_time."""
