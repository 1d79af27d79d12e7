"""Event use cases."""

from factory_events.application.use_cases.events.ingest_batch import EventIngestionService

__all__ = ["EventIngestionService"]
