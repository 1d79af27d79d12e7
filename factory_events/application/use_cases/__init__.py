"""Use cases: batch ingestion with reconciliation, and defect analytics."""

from factory_events.application.use_cases.analytics import AnalyticsService
from factory_events.application.use_cases.events import EventIngestionService

__all__ = ["AnalyticsService", "EventIngestionService"]
