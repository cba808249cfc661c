"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from agentsites.api.v1.dependencies.
"""

from fastapi import APIRouter

from agentsites.api.v1.endpoints import (
    health,
    me,
    propagation,
    roles,
    sites,
    user_roles,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(me.router, prefix="/me", tags=["me"])
api_router.include_router(roles.router, tags=["roles"])
api_router.include_router(user_roles.router, prefix="/users", tags=["user-roles"])
api_router.include_router(sites.router, prefix="/sites", tags=["sites"])
api_router.include_router(propagation.router, prefix="/propagation", tags=["propagation"])
api_router.include_router(
    propagation.trigger_router, prefix="/propagate-updates", tags=["propagation"]
)
