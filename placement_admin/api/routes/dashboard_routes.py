"""
Dashboard Routes

GET /dashboard - Tabs visible to the signed-in admin, plus the department list
GET /dashboard/departments - Department names and codes
"""

from typing import List

from fastapi import APIRouter, Depends

from placement_admin.core.auth import SessionContext, get_session_context
from placement_admin.core.departments import list_departments
from placement_admin.schemas.schemas import DashboardResponse, DepartmentResponse
from placement_admin.services.access import visible_tabs

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(ctx: SessionContext = Depends(get_session_context)):
    """
    Which tabs to render. This is presentation only: every operation behind
    a tab checks access again on the server.
    """
    user = ctx.current_user
    return DashboardResponse(
        admin_type=user.admin_type,
        department_code=user.department_code,
        tabs=visible_tabs(ctx),
        departments=[DepartmentResponse(**dept) for dept in list_departments()],
    )


@router.get("/departments", response_model=List[DepartmentResponse])
async def get_departments():
    return [DepartmentResponse(**dept) for dept in list_departments()]
