"""
Admin Routes (A1 only)

GET /admins - List admins (search, status filters)
PATCH /admins/{id}/status - Block or unblock an admin
DELETE /admins/{id} - Delete an admin record
"""

from fastapi import APIRouter, Depends

from placement_admin.core.auth import SessionContext, get_session_context
from placement_admin.core.errors import AccessDeniedError
from placement_admin.schemas.schemas import MutationResponse, RecordListResponse
from placement_admin.services.management_service import ADMINS, RecordManager
from placement_admin.services.record_store import RecordStore, get_record_store

router = APIRouter(prefix="/admins", tags=["Admins"])


def get_admin_manager(store: RecordStore = Depends(get_record_store)) -> RecordManager:
    return RecordManager(store, ADMINS)


def _refuse_self(ctx: SessionContext, admin_id: str) -> None:
    # Admins may not block or delete their own account
    if ctx.current_user.id == admin_id:
        raise AccessDeniedError("You cannot change your own account")


@router.get("", response_model=RecordListResponse)
async def list_admins(
    search: str = "",
    status: str = "all",
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_admin_manager),
):
    records = manager.list(ctx, search=search, status=status)
    return RecordListResponse(records=records, total=len(records))


@router.patch("/{admin_id}/status", response_model=MutationResponse)
async def toggle_admin_status(
    admin_id: str,
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_admin_manager),
):
    _refuse_self(ctx, admin_id)
    new_status = manager.toggle_status(ctx, admin_id)
    records = manager.list(ctx)
    return MutationResponse(message=f"Admin {new_status}", records=records, total=len(records))


@router.delete("/{admin_id}", response_model=MutationResponse)
async def delete_admin(
    admin_id: str,
    ctx: SessionContext = Depends(get_session_context),
    manager: RecordManager = Depends(get_admin_manager),
):
    _refuse_self(ctx, admin_id)
    manager.delete(ctx, admin_id)
    records = manager.list(ctx)
    return MutationResponse(message="Admin deleted successfully", records=records, total=len(records))
