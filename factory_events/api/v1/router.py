"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from factory_events.api.v1.dependencies.
"""

from fastapi import APIRouter

from factory_events.api.v1.endpoints import events, health, stats

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
