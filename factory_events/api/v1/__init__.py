"""API version 1."""

from factory_events.api.v1.router import api_router

__all__ = ["api_router"]
