"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.resource_routes import router as resource_router
from app.api.routes.bookmark_routes import router as bookmark_router
from app.api.routes.company_routes import router as company_router
from app.api.routes.analytics_routes import router as analytics_router
from app.api.routes.announcement_routes import router as announcement_router
from app.api.routes.forum_routes import router as forum_router
from app.api.routes.admin_routes import router as admin_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(resource_router)
api_router.include_router(bookmark_router)
api_router.include_router(company_router)
api_router.include_router(analytics_router)
api_router.include_router(announcement_router)
api_router.include_router(forum_router)
api_router.include_router(admin_router)
