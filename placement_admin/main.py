"""
Placement Admin Console - Main Application

FastAPI backend with:
- PostgreSQL identity service (credentials, revoked sessions)
- MongoDB record store (students, recruiters, admins, contact messages)
- JWT sessions for admins (A1 lead, A2 department assistant)
- Spreadsheet bulk import of students

Run: uvicorn placement_admin.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from placement_admin import __version__
from placement_admin.api.routes import api_router
from placement_admin.core.config import get_settings
from placement_admin.core.errors import register_exception_handlers
from placement_admin.core.logging import setup_logging
from placement_admin.db.mongodb import init_mongo_indexes, test_mongo_connection
from placement_admin.db.postgres import init_identity_schema, test_postgres_connection

settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Placement Admin Console",
    description="""
    Administrative back office of the campus placement platform.

    ## Features
    - **Signup**: single student / recruiter / admin accounts
    - **Bulk import**: up to 100 students per CSV or Excel file
    - **Management**: search, filter, edit, block and delete records
    - **Messages**: contact-form submissions, scoped by department
    - **Export**: students as CSV
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create identity tables and MongoDB indexes."""
    try:
        init_identity_schema()
        logger.info("Identity schema ready")
    except Exception as e:
        logger.warning("Identity schema initialization failed: %s", e)

    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Placement Admin Console", "version": __version__}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    postgres_ok = test_postgres_connection()
    mongo_ok = test_mongo_connection()
    return {
        "status": "healthy" if postgres_ok and mongo_ok else "degraded",
        "postgres": "connected" if postgres_ok else "disconnected",
        "mongodb": "connected" if mongo_ok else "disconnected",
    }
