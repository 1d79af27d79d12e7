"""Shared utilities: telemetry, clock and datetime helpers.

Used by domain, application, and infrastructure. No business logic.
"""
