"""
Placement Resource Portal - Main Application

FastAPI backend with:
- PostgreSQL for resources, companies, bookmarks, announcements and the forum
- MongoDB for the download/view/bookmark event log
- JWT verification for tokens issued by the external auth provider

Run: uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import api_router
from app.db.mongodb import init_mongo_indexes
from app.core.config import get_settings
from app.core.logging_config import setup_logging

settings = get_settings()
setup_logging(level=settings.log_level, log_file=settings.log_file)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Placement Resource Portal",
    description="""
    Study resources for campus placements.

    ## Features
    - **General Resources**: Folder tree derived from resource folder paths
    - **Companies**: Company pages with their resources
    - **Tracking**: Download and in-site view events
    - **Bookmarks**: Per-user saved resources
    - **Analytics**: Download/view/bookmark totals and top resources
    - **Announcements & Forum**: Mentor notices, student questions and replies
    - **Admin**: Role assignment and account activation

    ## Databases
    - PostgreSQL: Structured data (resources, companies, bookmarks, forum, profiles)
    - MongoDB: resource_analytics event log
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except Exception as e:
        # Analytics degrade to download_count while the event log is down
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Placement Resource Portal"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from app.db.postgres import test_postgres_connection
    from app.db.mongodb import test_mongo_connection

    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
