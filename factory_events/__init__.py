"""Factory events: batch ingestion, reconciliation and defect analytics for machine telemetry."""
