"""
Top-level API router.

Aggregates the domain routers.  Tasks live under ``/tasks``; the
health endpoint defines its own ``/health`` path, so it is included
without a prefix.
"""

from fastapi import APIRouter

from .endpoints import health, tasks


router = APIRouter()

router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
router.include_router(health.router, tags=["health"])
