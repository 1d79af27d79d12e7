"""Persistence models: ORM entities and mixins."""

from factory_events.infrastructure.persistence.models.event import Event
from factory_events.infrastructure.persistence.models.mixins import TimestampMixin

__all__ = ["Event", "TimestampMixin"]
