"""Infrastructure layer: SQL persistence."""
