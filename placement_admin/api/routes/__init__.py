"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from placement_admin.api.routes.admin_routes import router as admin_router
from placement_admin.api.routes.auth_routes import router as auth_router
from placement_admin.api.routes.contact_routes import router as contact_router
from placement_admin.api.routes.dashboard_routes import router as dashboard_router
from placement_admin.api.routes.message_routes import router as message_router
from placement_admin.api.routes.recruiter_routes import router as recruiter_router
from placement_admin.api.routes.signup_routes import router as signup_router
from placement_admin.api.routes.student_routes import router as student_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(signup_router)
api_router.include_router(student_router)
api_router.include_router(recruiter_router)
api_router.include_router(admin_router)
api_router.include_router(message_router)
api_router.include_router(contact_router)
api_router.include_router(dashboard_router)
