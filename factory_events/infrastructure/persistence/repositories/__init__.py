"""Repositories: SQL implementations of the application repository ports."""

from factory_events.infrastructure.persistence.repositories.event_repo import EventRepository

__all__ = ["EventRepository"]
