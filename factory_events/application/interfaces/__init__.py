"""Interfaces (ports) for the application layer."""

from factory_events.application.interfaces.repositories import IEventRepository
from factory_events.application.interfaces.services import (
    IClock,
    IEventValidator,
    IPayloadHasher,
)

__all__ = [
    "IClock",
    "IEventRepository",
    "IEventValidator",
    "IPayloadHasher",
]
