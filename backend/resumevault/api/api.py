"""
API Router Aggregator.

Combines all v1 API routers into a single router for the main app.
"""

from fastapi import APIRouter

from resumevault.api.v1 import admin, auth, profile

api_router = APIRouter()

# Include all v1 routers with their prefixes and tags
api_router.include_router(
    auth.router,
    tags=["Authentication"],
)

api_router.include_router(
    profile.router,
    tags=["Profile"],
)

api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["Admin"],
)
