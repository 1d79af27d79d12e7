"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from factory_events.domain.enums import MachineHealth, RecordOutcome, RejectionReason
from factory_events.domain.exceptions import (
    EventStoreException,
    FactoryEventsException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    "EventStoreException",
    "FactoryEventsException",
    "MachineHealth",
    "RecordOutcome",
    "RejectionReason",
    "ResourceNotFoundException",
    "ValidationException",
]
